"""頂点（またはパス全体）を乱数でずらす modifier。"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import (
    DISABLED_FALLOFF,
    FalloffParams,
    blend_coords,
    calculate_falloff,
    falloff_strengths,
)
from plotweave.core.geometry import centroid
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier

TRANSFORM_MODES: tuple[str, ...] = ("deform", "translate")


@modifier(falloff=True)
def jitter(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    amount_x: float = 5.0,
    amount_y: float = 5.0,
    transform_mode: str = "deform",
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """共有乱数で ±amount のずれを加える。

    Parameters
    ----------
    amount_x, amount_y : float, default 5.0
        軸ごとの最大ずれ [mm]。
    transform_mode : {"deform", "translate"}, default "deform"
        deform は頂点ごと（1 頂点につき x, y の 2 回消費）。
        translate はパスごとに 1 つのずれ（1 パスにつき 2 回消費）で、強度は重心で評価する。
    """
    ax = float(amount_x)
    ay = float(amount_y)
    amount = np.array([ax, ay], dtype=np.float64)
    rng = ctx.rng

    def _translate(path: Path) -> Path:
        offset = (np.array([rng(), rng()], dtype=np.float64) - 0.5) * 2.0 * amount
        if len(path) == 0:
            return path
        s = calculate_falloff(centroid(path.coords), falloff, ctx.canvas)
        return path.with_coords(path.coords + offset * s)

    def _deform(path: Path) -> Path:
        n = len(path)
        if n == 0:
            return path
        draws = rng.random(2 * n).reshape(n, 2)
        jittered = path.coords + (draws - 0.5) * 2.0 * amount
        s = falloff_strengths(path.coords, falloff, ctx.canvas)
        return path.with_coords(blend_coords(path.coords, jittered, s))

    return map_paths(layers, _translate if transform_mode == "translate" else _deform)
