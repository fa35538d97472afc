"""キャンバス上の点を中心に回転する modifier。"""

from __future__ import annotations

import math
from collections.abc import Sequence

from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams, blend_coords, falloff_strengths
from plotweave.core.geometry import rotate_coords
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier


@modifier(falloff=True)
def rotate(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    angle: float = 0.0,
    center_x: float = 50.0,
    center_y: float = 50.0,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """(center_x, center_y) [%] を中心に angle [deg] 回転する。"""
    rad = math.radians(float(angle))
    if rad == 0.0:
        return list(layers)
    cx = ctx.canvas.pct_x(center_x)
    cy = ctx.canvas.pct_y(center_y)

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        rotated = rotate_coords(path.coords, rad, cx, cy)
        if not falloff.enabled:
            return path.with_coords(rotated)
        s = falloff_strengths(path.coords, falloff, ctx.canvas)
        return path.with_coords(blend_coords(path.coords, rotated, s))

    return map_paths(layers, _apply)
