"""
どこで: `src/plotweave/core/generators/grid.py`。
何を: 格子（線 / 十字 / 点）を生成する。補助入力 "stamp" があれば各交点にスタンプを配置する。
なぜ: 格子状の配置を、単純な線画とパス素材の繰り返しの両方で使えるようにするため。
"""

from __future__ import annotations

from plotweave.core.algorithms.stamp import (
    StampSettings,
    has_stamp,
    place_stamp,
    stamp_center,
    stamp_rotation,
)
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import circle_path, line_path
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

GRID_STYLES: tuple[str, ...] = ("lines", "crosses", "dots")

_DOT_SEGMENTS = 16


@generator(stamp=True)
def grid(
    ctx: ExecutionContext,
    *,
    rows: int = 10,
    cols: int = 10,
    grid_width: float = 150.0,
    grid_height: float = 150.0,
    style: str = "lines",
    cross_size: float = 5.0,
    centered: bool = True,
    position_x: float = 50.0,
    position_y: float = 50.0,
    stamp: StampSettings = StampSettings(),
) -> list[Layer]:
    """rows x cols の格子を生成する。

    Parameters
    ----------
    rows, cols : int
        セル数。交点は `(rows + 1) * (cols + 1)` 個。
    grid_width, grid_height : float
        格子全体の寸法 [mm]。
    style : {"lines", "crosses", "dots"}, default "lines"
        スタンプが無い場合の描き方。
    cross_size : float, default 5.0
        十字の長さ / 点の直径。
    stamp : StampSettings
        スタンプ配置の設定（補助入力 "stamp" がある場合のみ使用）。

    Returns
    -------
    list[Layer]
        id "grid" の Layer 1 枚。
    """
    n_rows = max(1, int(rows))
    n_cols = max(1, int(cols))
    gw = float(grid_width)
    gh = float(grid_height)
    canvas = ctx.canvas
    if centered:
        ox = (float(canvas.width) - gw) / 2.0
        oy = (float(canvas.height) - gh) / 2.0
    else:
        ox = canvas.pct_x(position_x) - gw / 2.0
        oy = canvas.pct_y(position_y) - gh / 2.0

    def _node(r: int, c: int) -> tuple[float, float]:
        return (ox + (c / n_cols) * gw, oy + (r / n_rows) * gh)

    paths: list[Path] = []
    stamp_layers = ctx.input_layers("stamp")
    if has_stamp(stamp_layers):
        anchor = stamp_center(stamp_layers)
        for r in range(n_rows + 1):
            for c in range(n_cols + 1):
                x, y = _node(r, c)
                rot = stamp_rotation(stamp.rotation, ctx.rng, stamp.random_rotation)
                paths.extend(place_stamp(stamp_layers, anchor, x, y, stamp.scale, rot))
    elif style == "lines":
        for r in range(n_rows + 1):
            _, y = _node(r, 0)
            paths.append(line_path(ox, y, ox + gw, y))
        for c in range(n_cols + 1):
            x, _ = _node(0, c)
            paths.append(line_path(x, oy, x, oy + gh))
    elif style == "crosses":
        half = float(cross_size) / 2.0
        for r in range(n_rows + 1):
            for c in range(n_cols + 1):
                x, y = _node(r, c)
                paths.append(line_path(x - half, y, x + half, y))
                paths.append(line_path(x, y - half, x, y + half))
    elif style == "dots":
        radius = float(cross_size) / 2.0
        for r in range(n_rows + 1):
            for c in range(n_cols + 1):
                x, y = _node(r, c)
                paths.append(circle_path(x, y, radius, _DOT_SEGMENTS))

    return [Layer("grid", tuple(paths))]
