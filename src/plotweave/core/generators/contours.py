"""fbm ノイズ場の等高線を描く generator。"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.algorithms.chaikin import chaikin_smooth
from plotweave.core.algorithms.marching_squares import connect_segments, marching_squares
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import fbm_array
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

_THRESHOLD_LO = 0.1
_THRESHOLD_SPAN = 0.8


def contour_thresholds(levels: int) -> np.ndarray:
    """[0.1, 0.9] を等分したしきい値列。1 段なら中央の 0.5。"""
    n = max(0, int(levels))
    if n == 0:
        return np.zeros((0,), dtype=np.float64)
    if n == 1:
        return np.array([_THRESHOLD_LO + _THRESHOLD_SPAN / 2.0])
    return _THRESHOLD_LO + np.arange(n, dtype=np.float64) / (n - 1) * _THRESHOLD_SPAN


@generator
def contours(
    ctx: ExecutionContext,
    *,
    contour_levels: int = 15,
    noise_scale: float = 0.01,
    noise_octaves: int = 2,
    seed_offset: int = 0,
    smoothing: int = 2,
    resolution: int = 100,
    margin: float = 10.0,
) -> list[Layer]:
    """余白を除いた矩形にノイズ場を張り、contour_levels 段の等高線を返す。

    Parameters
    ----------
    contour_levels : int, default 15
        等高線の段数。
    noise_scale, noise_octaves
        fbm の基本周波数とオクターブ数。シードは `ctx.seed + seed_offset`。
    smoothing : int, default 2
        各折れ線に開パスの Chaikin を掛ける回数。
    resolution : int, default 100
        長辺方向のセル数。
    margin : float, default 10.0
        キャンバス端からの余白 [mm]。

    Returns
    -------
    list[Layer]
        id "contours" の Layer 1 枚。3 点未満の折れ線は捨てる。ctx.rng は消費しない。
    """
    canvas = ctx.canvas
    m = float(margin)
    x0, y0 = m, m
    field_w = float(canvas.width) - 2.0 * m
    field_h = float(canvas.height) - 2.0 * m
    if field_w <= 0.0 or field_h <= 0.0:
        return [Layer("contours")]

    cell = max(field_w, field_h) / max(1, int(resolution))
    cols = math.ceil(field_w / cell) + 1
    rows = math.ceil(field_h / cell) + 1
    gx = x0 + np.arange(cols, dtype=np.float64) * cell
    gy = y0 + np.arange(rows, dtype=np.float64) * cell
    xx, yy = np.meshgrid(gx, gy)
    seed = ctx.seed + int(seed_offset)
    field = fbm_array(xx, yy, float(noise_scale), int(noise_octaves), seed).reshape(rows, cols)

    paths: list[Path] = []
    for threshold in contour_thresholds(contour_levels):
        for line in connect_segments(marching_squares(field, float(threshold), x0, y0, cell)):
            if len(line) < 3:
                continue
            coords = chaikin_smooth(np.asarray(line, dtype=np.float64), False, int(smoothing))
            paths.append(Path(coords, closed=False))
    return [Layer("contours", tuple(paths))]
