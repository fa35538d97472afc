"""乱数母点のボロノイ辺を描く generator。"""

from __future__ import annotations

import numpy as np

from plotweave.core.algorithms.voronoi import relax_sites, voronoi_edges
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import Layer
from plotweave.core.unit_registry import generator


@generator
def voronoi(
    ctx: ExecutionContext,
    *,
    point_count: int = 30,
    relaxation_iterations: int = 0,
    margin: float = 20.0,
) -> list[Layer]:
    """余白内に point_count 個の母点を撒き、ボロノイ辺を 2 点パスで返す。

    母点は 1 点につき x, y の順で共有乱数を 2 回消費する。
    relaxation_iterations 回の Lloyd 緩和の後、余白の矩形でクリップした辺を返す。
    """
    canvas = ctx.canvas
    w = float(canvas.width)
    h = float(canvas.height)
    m = float(margin)
    n = max(0, int(point_count))

    draws = ctx.rng.random(2 * n).reshape(n, 2)
    sites = np.empty((n, 2), dtype=np.float64)
    sites[:, 0] = m + draws[:, 0] * (w - 2.0 * m)
    sites[:, 1] = m + draws[:, 1] * (h - 2.0 * m)

    for _ in range(max(0, int(relaxation_iterations))):
        sites = relax_sites(sites, w, h)

    edges = voronoi_edges(sites, (m, m, w - m, h - m), max(w, h) * 2.0)
    paths = tuple(line_path(e[0], e[1], e[2], e[3]) for e in edges)
    return [Layer("voronoi", paths)]
