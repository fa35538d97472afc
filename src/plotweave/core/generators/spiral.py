"""アルキメデス螺旋（r = b * theta）を生成する generator。"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator


@generator
def spiral(
    ctx: ExecutionContext,
    *,
    turns: float = 5.0,
    expansion: float = 10.0,
    points_per_turn: int = 64,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
) -> list[Layer]:
    """1 本の開いた螺旋を生成する。

    Parameters
    ----------
    turns : float, default 5.0
        周回数。
    expansion : float, default 10.0
        1 周あたりの半径の増分 [mm]。
    points_per_turn : int, default 64
        1 周あたりの頂点数。総点数は `floor(turns * points_per_turn) + 1`。

    Returns
    -------
    list[Layer]
        id "spiral" の Layer 1 枚。
    """
    cx, cy = ctx.canvas.anchor(centered, position_x, position_y)
    ppt = max(1, int(points_per_turn))
    total = int(math.floor(float(turns) * ppt))
    if total < 0:
        return [Layer("spiral", ())]

    u = np.arange(total + 1, dtype=np.float64) / ppt
    angle = u * (2.0 * np.pi)
    radius = u * float(expansion)
    coords = np.stack([cx + np.cos(angle) * radius, cy + np.sin(angle) * radius], axis=1)
    return [Layer("spiral", (Path(coords, closed=False),))]
