"""パスをキャンバス比の矩形でクリップする modifier。"""

from __future__ import annotations

from collections.abc import Sequence

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import clip_path_to_rect
from plotweave.core.model import Layer, flat_map_paths
from plotweave.core.unit_registry import modifier


@modifier
def clip_rect(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    x: float = 10.0,
    y: float = 10.0,
    width: float = 80.0,
    height: float = 80.0,
) -> list[Layer]:
    """矩形の内側だけを残す。

    Parameters
    ----------
    x, y, width, height : float
        クリップ矩形（全てキャンバスに対する %）。

    Returns
    -------
    list[Layer]
        クリップ後の Layer 列。出力パスは全て open で、矩形外のパスは消える。
    """
    canvas = ctx.canvas
    rx = canvas.pct_x(x)
    ry = canvas.pct_y(y)
    rw = canvas.pct_x(width)
    rh = canvas.pct_y(height)
    return flat_map_paths(layers, lambda p: clip_path_to_rect(p, rx, ry, rw, rh))
