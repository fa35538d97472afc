"""
どこで: `src/plotweave/core/modifiers/dash.py`。
何を: パスを弧長に沿って破線（dash / gap の繰り返し）へ分割する。
なぜ: ペンプロッタで破線表現を作るため（各 dash は弧長で再サンプルした開パス）。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import path_length, points_at_distances
from plotweave.core.model import Layer, Path, flat_map_paths
from plotweave.core.unit_registry import modifier

DASH_MODES: tuple[str, ...] = ("fixed", "fit")


@modifier
def dash(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    dash_length: float = 10.0,
    gap_length: float = 5.0,
    random_dash: float = 0.0,
    random_gap: float = 0.0,
    offset: float = 0.0,
    mode: str = "fixed",
    min_segment_points: int = 2,
) -> list[Layer]:
    """破線化する。

    Parameters
    ----------
    dash_length, gap_length : float
        dash / gap の基準長 [mm]。
    random_dash, random_gap : float
        長さのばらつき [%]（±）。dash ごとに dash → gap の順で乱数を 2 回消費する。
    offset : float
        パターン 1 周期に対する開始オフセット [%]。
    mode : {"fixed", "fit"}
        fit はパス長に整数周期が収まるよう dash / gap を伸縮する。
    min_segment_points : int
        1 本の dash の最小分割数。実際は `max(min_segment_points, ceil(長さ / 2))`。

    Notes
    -----
    長さ 0 のパスは出力しない。閉パスの閉じ辺は対象外（頂点列を順にたどる）。
    """
    rng = ctx.rng
    rd = float(random_dash) / 100.0
    rg = float(random_gap) / 100.0
    off = float(offset) / 100.0
    min_pts = int(min_segment_points)

    def _apply(path: Path) -> list[Path]:
        v = path.coords
        total = path_length(v)
        if total == 0.0:
            return []

        d_len = float(dash_length)
        g_len = float(gap_length)
        pattern = d_len + g_len
        if mode == "fit" and pattern > 0.0 and total > pattern:
            count = math.floor(total / pattern + 0.5)
            factor = total / (count * pattern)
            d_len *= factor
            g_len *= factor

        out: list[Path] = []
        current = off * (d_len + g_len)
        while current < total:
            this_dash = d_len * (1.0 + (rng() - 0.5) * 2.0 * rd)
            this_gap = g_len * (1.0 + (rng() - 0.5) * 2.0 * rg)
            start = current
            end = min(current + this_dash, total)
            if end > start:
                n = max(min_pts, int(math.ceil((end - start) / 2.0)))
                dist = start + (np.arange(n + 1, dtype=np.float64) / n) * (end - start)
                out.append(Path(points_at_distances(v, dist), closed=False))
            next_pos = end + this_gap
            if next_pos <= current:
                # dash と gap が共に非正なら先へ進めない。
                break
            current = next_pos
        return out

    return flat_map_paths(layers, _apply)
