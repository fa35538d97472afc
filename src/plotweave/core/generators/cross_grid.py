"""セル中心に十字（+ / x）を並べる generator。十字 1 つを一筆書きの 1 パスで描く。"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

CROSS_STYLES: tuple[str, ...] = ("x", "plus")


def _cross_template(half: float, line_count: int, line_spacing: float) -> np.ndarray:
    """原点中心・無回転の十字の点列を返す。

    横腕の平行線を往復順に辿り、中心を経由して縦腕の平行線を往復順に辿る。
    """
    n = max(1, int(line_count))
    offsets = [(i - (n - 1) / 2.0) * line_spacing for i in range(n)]
    pts: list[tuple[float, float]] = []
    for i, off in enumerate(offsets):
        a, b = (-half, half) if i % 2 == 0 else (half, -half)
        pts.append((a, off))
        pts.append((b, off))
    pts.append((0.0, 0.0))
    for i, off in enumerate(offsets):
        a, b = (-half, half) if i % 2 == 0 else (half, -half)
        pts.append((off, a))
        pts.append((off, b))
    return np.asarray(pts, dtype=np.float64)


@generator
def cross_grid(
    ctx: ExecutionContext,
    *,
    columns: int = 10,
    rows: int = 10,
    spacing: float = 10.0,
    cross_size: float = 8.0,
    cross_style: str = "x",
    line_count: int = 1,
    line_spacing: float = 1.0,
    show_grid: bool = False,
    center_x: float = 50.0,
    center_y: float = 50.0,
) -> list[Layer]:
    """columns x rows のセル中心に十字を置く。

    Parameters
    ----------
    spacing : float, default 10.0
        セルの一辺 [mm]。格子全体は (center_x, center_y) [%] を中心にする。
    cross_style : {"x", "plus"}, default "x"
        "x" は 45° 回転した十字。
    line_count, line_spacing
        腕 1 本あたりの平行線数と間隔 [mm]。
    show_grid : bool, default False
        True ならセル境界線を id "cross_grid_lines" の Layer として追加する。
    """
    canvas = ctx.canvas
    n_cols = max(0, int(columns))
    n_rows = max(0, int(rows))
    sp = float(spacing)
    grid_w = n_cols * sp
    grid_h = n_rows * sp
    ox = canvas.pct_x(center_x) - grid_w / 2.0
    oy = canvas.pct_y(center_y) - grid_h / 2.0

    rot = math.pi / 4.0 if cross_style == "x" else 0.0
    c, s = math.cos(rot), math.sin(rot)
    local = _cross_template(float(cross_size) / 2.0, int(line_count), float(line_spacing))
    rotated = np.empty_like(local)
    rotated[:, 0] = local[:, 0] * c - local[:, 1] * s
    rotated[:, 1] = local[:, 0] * s + local[:, 1] * c

    crosses: list[Path] = []
    for row in range(n_rows):
        for col in range(n_cols):
            cx = ox + col * sp + sp / 2.0
            cy = oy + row * sp + sp / 2.0
            crosses.append(Path(rotated + np.array([cx, cy]), closed=False))

    layers = [Layer("cross_grid", tuple(crosses))]
    if show_grid:
        lines: list[Path] = []
        for row in range(n_rows + 1):
            y = oy + row * sp
            lines.append(line_path(ox, y, ox + grid_w, y))
        for col in range(n_cols + 1):
            x = ox + col * sp
            lines.append(line_path(x, oy, x, oy + grid_h))
        layers.append(Layer("cross_grid_lines", tuple(lines)))
    return layers
