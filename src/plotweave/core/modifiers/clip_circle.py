"""パスを円でクリップする modifier（invert で外側を残す）。"""

from __future__ import annotations

from collections.abc import Sequence

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import clip_path_to_circle
from plotweave.core.model import Layer, flat_map_paths
from plotweave.core.unit_registry import modifier


@modifier
def clip_circle(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    center_x: float = 50.0,
    center_y: float = 50.0,
    radius: float = 80.0,
    invert: bool = False,
) -> list[Layer]:
    cx = ctx.canvas.pct_x(center_x)
    cy = ctx.canvas.pct_y(center_y)
    r = float(radius)
    return flat_map_paths(layers, lambda p: clip_path_to_circle(p, cx, cy, r, bool(invert)))
