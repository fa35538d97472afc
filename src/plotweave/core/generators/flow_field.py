"""
どこで: `src/plotweave/core/generators/flow_field.py`。
何を: 2D ノイズを角度場として、ランダムな始点から流線を追跡する。スタンプ入力があれば始点に配置する。
なぜ: 有機的な線の束を、シードだけで再現可能に生成するため。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from plotweave.core.algorithms.stamp import (
    StampSettings,
    has_stamp,
    place_stamp,
    stamp_center,
    stamp_rotation,
)
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import noise2d_kernel
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator


@njit(cache=True)  # type: ignore[misc]
def _trace_flow_line(
    x0: float,
    y0: float,
    steps: int,
    step_size: float,
    noise_scale: float,
    seed: int,
    bx: float,
    by: float,
    bw: float,
    bh: float,
    out: np.ndarray,
) -> int:
    """流線を out に書き込み、点数を返す。領域外に出たらその手前で止める。"""
    out[0, 0] = x0
    out[0, 1] = y0
    x = x0
    y = y0
    k = 1
    for _ in range(steps):
        angle = noise2d_kernel(x * noise_scale, y * noise_scale, seed) * math.pi * 4.0
        x += math.cos(angle) * step_size
        y += math.sin(angle) * step_size
        if x < bx or x > bx + bw or y < by or y > by + bh:
            break
        out[k, 0] = x
        out[k, 1] = y
        k += 1
    return k


@generator(stamp=True)
def flow_field(
    ctx: ExecutionContext,
    *,
    lines: int = 200,
    steps: int = 50,
    step_size: float = 3.0,
    noise_scale: float = 0.01,
    field_width: float = 180.0,
    field_height: float = 250.0,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
    stamp: StampSettings = StampSettings(),
) -> list[Layer]:
    """ノイズ流れ場の流線を生成する。

    Parameters
    ----------
    lines : int, default 200
        始点の数（始点ごとに乱数 2 回）。
    steps : int, default 50
        1 本あたりの最大ステップ数。
    step_size : float, default 3.0
        1 ステップの移動量 [mm]。
    noise_scale : float, default 0.01
        ノイズ座標へのスケール。角度は `noise * 4π`。ノイズのシードは ctx.seed。
    field_width, field_height : float
        流れ場の寸法 [mm]。
    stamp : StampSettings
        スタンプ配置の設定。rotation="follow" では始点の場の角度に沿わせる。

    Returns
    -------
    list[Layer]
        id "flow_field" の Layer 1 枚。2 点未満の流線は出力しない。
    """
    canvas = ctx.canvas
    rng = ctx.rng
    fw = float(field_width)
    fh = float(field_height)
    if centered:
        ox = (float(canvas.width) - fw) / 2.0
        oy = (float(canvas.height) - fh) / 2.0
    else:
        ox = canvas.pct_x(position_x) - fw / 2.0
        oy = canvas.pct_y(position_y) - fh / 2.0

    seed = int(ctx.seed) & 0xFFFFFFFF
    n_steps = max(0, int(steps))
    scale = float(noise_scale)

    stamp_layers = ctx.input_layers("stamp")
    use_stamp = has_stamp(stamp_layers)
    anchor = stamp_center(stamp_layers) if use_stamp else (0.0, 0.0)

    buf = np.empty((n_steps + 1, 2), dtype=np.float64)
    paths: list[Path] = []
    for _ in range(max(0, int(lines))):
        sx = ox + rng() * fw
        sy = oy + rng() * fh
        if use_stamp:
            angle = float(noise2d_kernel(sx * scale, sy * scale, seed)) * math.pi * 4.0
            rot = stamp_rotation(stamp.rotation, rng, stamp.random_rotation, angle)
            paths.extend(place_stamp(stamp_layers, anchor, sx, sy, stamp.scale, rot))
            continue
        k = int(_trace_flow_line(sx, sy, n_steps, float(step_size), scale, seed, ox, oy, fw, fh, buf))
        if k >= 2:
            paths.append(Path(buf[:k], closed=False))

    return [Layer("flow_field", tuple(paths))]
