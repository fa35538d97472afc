"""2D ノイズ（オクターブ合成）で頂点をずらす modifier。"""

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
from plotweave.core.geometry import centroid, noise2d_array
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier

# y 成分は x 成分とずらした座標でサンプルする。
_Y_CHANNEL_OFFSET = 100.0


def noise_offsets(
    coords: np.ndarray,
    amount: float,
    scale: float,
    octaves: int,
    seed: int,
) -> np.ndarray:
    """各頂点のノイズ変位 shape (N, 2) を返す。

    オクターブごとに周波数 2 倍・振幅 1/2。各成分は `(noise - 0.5) * 2` を合成する。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    out = np.zeros_like(v)
    amp = 1.0
    freq = float(scale)
    for _ in range(max(0, int(octaves))):
        x = v[:, 0] * freq
        y = v[:, 1] * freq
        out[:, 0] += (noise2d_array(x, y, seed) - 0.5) * 2.0 * amp
        out[:, 1] += (
            noise2d_array(x + _Y_CHANNEL_OFFSET, y + _Y_CHANNEL_OFFSET, seed) - 0.5
        ) * 2.0 * amp
        amp *= 0.5
        freq *= 2.0
    return out * float(amount)


@modifier(falloff=True)
def noise_displace(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    amount: float = 10.0,
    scale: float = 0.02,
    octaves: int = 1,
    transform_mode: str = "deform",
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """ノイズ変位を加える。ノイズのシードは ctx.seed で、乱数列は消費しない。"""
    if float(amount) == 0.0:
        return list(layers)
    seed = int(ctx.seed)

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        v = path.coords
        if transform_mode == "translate":
            c = centroid(v)
            off = noise_offsets(np.asarray([c]), amount, scale, octaves, seed)[0]
            s = calculate_falloff(c, falloff, ctx.canvas)
            return path.with_coords(v + off * s)
        displaced = v + noise_offsets(v, amount, scale, octaves, seed)
        return path.with_coords(blend_coords(v, displaced, falloff_strengths(v, falloff, ctx.canvas)))

    return map_paths(layers, _apply)
