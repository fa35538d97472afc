"""円弧（扇形を含む）を生成する generator。"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import arc_coords
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator


@generator
def arc(
    ctx: ExecutionContext,
    *,
    center_x: float = 50.0,
    center_y: float = 50.0,
    radius: float = 50.0,
    start_angle: float = 0.0,
    end_angle: float = 180.0,
    segments: int = 64,
    close_path: bool = False,
    arc_count: int = 1,
    radius_step: float = 10.0,
) -> list[Layer]:
    """半径を radius_step ずつ増やした円弧を arc_count 本生成する。

    Parameters
    ----------
    center_x, center_y : float
        中心 [%]。
    start_angle, end_angle : float
        角度範囲 [deg]。
    segments : int, default 64
        1 周あたりの分割数。実際の分割数は角度範囲に比例し、最低 2。
    close_path : bool, default False
        True なら中心を始点・終点に加えた閉じた扇形にする。

    Returns
    -------
    list[Layer]
        id "arc" の Layer 1 枚。
    """
    cx = ctx.canvas.pct_x(center_x)
    cy = ctx.canvas.pct_y(center_y)
    start = math.radians(float(start_angle))
    end = math.radians(float(end_angle))
    seg = max(2, int(math.ceil(abs(end - start) / (2.0 * math.pi) * int(segments))))
    center = np.array([[cx, cy]], dtype=np.float64)

    paths = []
    for a in range(max(0, int(arc_count))):
        r = float(radius) + a * float(radius_step)
        coords = arc_coords(cx, cy, r, start, end, seg)
        if close_path:
            coords = np.concatenate([center, coords, center], axis=0)
        paths.append(Path(coords, closed=bool(close_path)))
    return [Layer("arc", tuple(paths))]
