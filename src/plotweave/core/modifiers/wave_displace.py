"""進行方向に直交するサイン波で頂点をずらし、波打つたわみを加える modifier。"""

from __future__ import annotations

import math
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


@modifier(falloff=True)
def wave_displace(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    frequency: float = 0.05,
    amplitude: float = 10.0,
    angle: float = 0.0,
    phase: float = 0.0,
    transform_mode: str = "deform",
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """各頂点へサイン波由来の変位を加える。

    Parameters
    ----------
    layers : Sequence[Layer]
        変形対象の Layer 列。
    frequency : float, default 0.05
        空間周波数 [1/mm]。
    amplitude : float, default 10.0
        変位量 [mm]。
    angle : float, default 0.0
        波の進行方向 [deg]。変位はこれに直交する向き。
    phase : float, default 0.0
        位相 [deg]。
    transform_mode : {"deform", "translate"}, default "deform"
        translate はパス重心での変位をパス全体に適用する。

    Returns
    -------
    list[Layer]
        変形後の Layer 列。
    """
    amp = float(amplitude)
    if amp == 0.0:
        return list(layers)

    a = math.radians(float(angle))
    phase_rad = math.radians(float(phase))
    wave_dir = np.array([math.cos(a), math.sin(a)], dtype=np.float64)
    disp_dir = np.array([-math.sin(a), math.cos(a)], dtype=np.float64)
    k = 2.0 * math.pi * float(frequency)

    def _offsets(v: np.ndarray) -> np.ndarray:
        d = np.sin((v @ wave_dir) * k + phase_rad) * amp
        return d[:, None] * disp_dir[None, :]

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        v = path.coords
        if transform_mode == "translate":
            c = np.asarray([centroid(v)], dtype=np.float64)
            s = calculate_falloff((float(c[0, 0]), float(c[0, 1])), falloff, ctx.canvas)
            return path.with_coords(v + _offsets(c)[0] * s)
        s_arr = falloff_strengths(v, falloff, ctx.canvas)
        return path.with_coords(blend_coords(v, v + _offsets(v), s_arr))

    return map_paths(layers, _apply)
