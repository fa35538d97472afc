"""座標にスケールを適用する modifier。"""

from __future__ import annotations

from collections.abc import Sequence

from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams, blend_coords, falloff_strengths
from plotweave.core.geometry import scale_coords
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier


@modifier(falloff=True)
def scale(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    scale_x: float = 1.0,
    scale_y: float = 1.0,
    uniform: bool = True,
    center_x: float = 50.0,
    center_y: float = 50.0,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """スケール変換を適用（falloff 対応）。

    Parameters
    ----------
    layers : Sequence[Layer]
        スケール対象の Layer 列。
    scale_x, scale_y : float, default 1.0
        軸ごとの倍率。
    uniform : bool, default True
        True なら scale_y を無視して scale_x を両軸に使う。
    center_x, center_y : float, default 50.0
        スケール中心 [%]。
    falloff : FalloffParams
        有効時は元の点で評価した強度で補間する。

    Returns
    -------
    list[Layer]
        スケール後の Layer 列。
    """
    sx = float(scale_x)
    sy = sx if uniform else float(scale_y)
    if sx == 1.0 and sy == 1.0:
        return list(layers)
    cx = ctx.canvas.pct_x(center_x)
    cy = ctx.canvas.pct_y(center_y)

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        scaled = scale_coords(path.coords, sx, sy, cx, cy)
        if not falloff.enabled:
            return path.with_coords(scaled)
        s = falloff_strengths(path.coords, falloff, ctx.canvas)
        return path.with_coords(blend_coords(path.coords, scaled, s))

    return map_paths(layers, _apply)
