"""半径を等間隔に振った同心円群を生成する generator。"""

from __future__ import annotations

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import circle_path
from plotweave.core.model import Layer
from plotweave.core.unit_registry import generator


@generator
def concentric_circles(
    ctx: ExecutionContext,
    *,
    count: int = 20,
    min_radius: float = 10.0,
    max_radius: float = 100.0,
    segments: int = 64,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
) -> list[Layer]:
    """同心円を count 本生成する。

    Parameters
    ----------
    ctx : ExecutionContext
        実行コンテキスト（キャンバスのみ使用）。
    count : int, default 20
        円の本数。1 本のときは min/max の中間半径。
    min_radius, max_radius : float
        最内・最外の半径。
    segments : int, default 64
        円 1 周の分割数。各パスは `segments + 1` 点の閉パス。
    centered : bool, default True
        True ならキャンバス中心。False なら position_x/y [%]。

    Returns
    -------
    list[Layer]
        id "concentric" の Layer 1 枚。
    """
    cx, cy = ctx.canvas.anchor(centered, position_x, position_y)
    n = max(0, int(count))
    paths = []
    for i in range(n):
        t = 0.5 if n == 1 else i / (n - 1)
        radius = float(min_radius) + t * (float(max_radius) - float(min_radius))
        paths.append(circle_path(cx, cy, radius, int(segments)))
    return [Layer("concentric", tuple(paths))]
