"""中心から放射状に伸びる線分群を生成する generator。"""

from __future__ import annotations

import math

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import Layer
from plotweave.core.unit_registry import generator


@generator
def radial_lines(
    ctx: ExecutionContext,
    *,
    line_count: int = 24,
    inner_radius: float = 20.0,
    outer_radius: float = 100.0,
    angle_start: float = 0.0,
    angle_end: float = 360.0,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
) -> list[Layer]:
    """inner_radius から outer_radius までの放射線分を生成する。

    Notes
    -----
    角度範囲がちょうど 0→360 のときは終端を含めず等分する（始点と重ならないように）。
    """
    cx, cy = ctx.canvas.anchor(centered, position_x, position_y)
    n = max(0, int(line_count))
    start = math.radians(float(angle_start))
    end = math.radians(float(angle_end))
    full_turn = float(angle_start) == 0.0 and float(angle_end) == 360.0
    denom = n if full_turn else n - 1

    paths = []
    for i in range(n):
        t = 0.0 if n == 1 else i / denom
        a = start + t * (end - start)
        c = math.cos(a)
        s = math.sin(a)
        paths.append(
            line_path(
                cx + c * float(inner_radius),
                cy + s * float(inner_radius),
                cx + c * float(outer_radius),
                cy + s * float(outer_radius),
            )
        )
    return [Layer("radial", tuple(paths))]
