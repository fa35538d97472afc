"""
どこで: `src/plotweave/core/generators/lissajous.py`。リサージュ曲線 generator。
何を: 周波数比・位相・振幅・解像度から、キャンバス上のリサージュ曲線を 1 本の開パスとして生成する。
なぜ: 周期曲線を modifier と組み合わせる素材として使えるようにするため。
"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator


@generator
def lissajous(
    ctx: ExecutionContext,
    *,
    freq_a: float = 3.0,
    freq_b: float = 4.0,
    phase_shift: float = 90.0,
    amplitude: float = 80.0,
    resolution: int = 500,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
) -> list[Layer]:
    """リサージュ曲線を 1 本の開パスとして生成する。

    Parameters
    ----------
    freq_a : float, optional
        X 方向の角周波数係数。
    freq_b : float, optional
        Y 方向の角周波数係数。
    phase_shift : float, optional
        X 方向の位相 [deg]。
    amplitude : float, optional
        X/Y 共通の振幅 [mm]。
    resolution : int, optional
        `t ∈ [0, 2π]` の分割数。点数は `resolution + 1`。1 未満は 1 とみなす。

    Returns
    -------
    list[Layer]
        id "lissajous" の Layer 1 枚。
    """
    res = max(1, int(resolution))
    cx, cy = ctx.canvas.anchor(centered, position_x, position_y)
    delta = math.radians(float(phase_shift))
    amp = float(amplitude)

    t = np.arange(res + 1, dtype=np.float64) / res * (2.0 * np.pi)
    x = cx + amp * np.sin(float(freq_a) * t + delta)
    y = cy + amp * np.sin(float(freq_b) * t)

    coords = np.stack([x, y], axis=1)
    return [Layer("lissajous", (Path(coords, closed=False),))]
