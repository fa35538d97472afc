"""
どこで: `src/plotweave/core/algorithms/marching_squares.py`。
何を: スカラー場の等値線を marching squares で線分化し、端点一致で折れ線へつなぐ。
なぜ: 等高線 generator の本体を幾何処理として切り出し、単体でテストできるようにするため。
"""

from __future__ import annotations

import math

import numpy as np

Segment = tuple[tuple[float, float], tuple[float, float]]

CONNECT_TOLERANCE = 1e-3

# セル構成（tl=8, tr=4, br=2, bl=1）→ 出力する辺の組。
_CASES: dict[int, tuple[tuple[str, str], ...]] = {
    1: (("left", "bottom"),),
    14: (("left", "bottom"),),
    2: (("bottom", "right"),),
    13: (("bottom", "right"),),
    3: (("left", "right"),),
    12: (("left", "right"),),
    4: (("top", "right"),),
    11: (("top", "right"),),
    5: (("left", "top"), ("bottom", "right")),
    6: (("top", "bottom"),),
    9: (("top", "bottom"),),
    7: (("left", "top"),),
    8: (("left", "top"),),
    10: (("top", "right"), ("left", "bottom")),
}


def _edge_lerp(a: float, b: float, num: float, den: float) -> float:
    """辺上の交点。補間係数が有限でなければ辺の中点を返す。"""
    if den == 0.0:
        return (a + b) / 2.0
    t = num / den
    if not math.isfinite(t):
        return (a + b) / 2.0
    return a + (b - a) * max(0.0, min(1.0, t))


def marching_squares(
    field: np.ndarray,
    threshold: float,
    x0: float,
    y0: float,
    cell_size: float,
) -> list[Segment]:
    """等値線の線分を行優先のセル順で返す。

    Parameters
    ----------
    field : np.ndarray
        shape (rows, cols) のスカラー場。`field[r, c]` は `(x0 + c*cell, y0 + r*cell)` の値。
    threshold : float
        しきい値。値 >= threshold の格子点を内側とみなす。

    Returns
    -------
    list[Segment]
        `((x1, y1), (x2, y2))` の列。鞍点（5 / 10）は 2 本を出す。
    """
    f = np.asarray(field, dtype=np.float64)
    if f.ndim != 2 or f.shape[0] < 2 or f.shape[1] < 2:
        return []
    th = float(threshold)
    inside = f >= th
    config = (
        inside[:-1, :-1].astype(np.int64) * 8
        + inside[:-1, 1:].astype(np.int64) * 4
        + inside[1:, 1:].astype(np.int64) * 2
        + inside[1:, :-1].astype(np.int64)
    )
    cs = float(cell_size)
    segments: list[Segment] = []
    rows, cols = np.nonzero((config != 0) & (config != 15))
    for r, c in zip(rows.tolist(), cols.tolist()):
        tl = float(f[r, c])
        tr = float(f[r, c + 1])
        br = float(f[r + 1, c + 1])
        bl = float(f[r + 1, c])
        cx = x0 + c * cs
        cy = y0 + r * cs
        pts = {
            "top": (_edge_lerp(cx, cx + cs, th - tl, tr - tl), cy),
            "right": (cx + cs, _edge_lerp(cy, cy + cs, th - tr, br - tr)),
            "bottom": (_edge_lerp(cx, cx + cs, th - bl, br - bl), cy + cs),
            "left": (cx, _edge_lerp(cy, cy + cs, th - tl, bl - tl)),
        }
        for a, b in _CASES[int(config[r, c])]:
            segments.append((pts[a], pts[b]))
    return segments


def connect_segments(
    segments: list[Segment],
    tolerance: float = CONNECT_TOLERANCE,
) -> list[list[tuple[float, float]]]:
    """線分を端点一致（各軸の差 < tolerance）で貪欲につないだ折れ線を返す。

    未使用の線分を番号順に起点とし、末尾側を伸ばせなくなるまで伸ばしてから先頭側を伸ばす。
    接続候補は番号の小さい線分を優先し、同じ線分では始点一致を終点一致より優先する。
    """
    n = len(segments)
    if n == 0:
        return []
    tol = float(tolerance)

    # tolerance 幅のバケットに端点を登録し、近傍 3x3 バケットだけを調べる。
    buckets: dict[tuple[int, int], list[int]] = {}
    for i, (start, end) in enumerate(segments):
        for p in (start, end):
            key = (math.floor(p[0] / tol), math.floor(p[1] / tol))
            buckets.setdefault(key, []).append(i)

    used = [False] * n

    def _same(a: tuple[float, float], b: tuple[float, float]) -> bool:
        return abs(a[0] - b[0]) < tol and abs(a[1] - b[1]) < tol

    def _find(point: tuple[float, float]) -> tuple[int, bool] | None:
        bx = math.floor(point[0] / tol)
        by = math.floor(point[1] / tol)
        candidates: set[int] = set()
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                candidates.update(buckets.get((bx + dx, by + dy), ()))
        for i in sorted(candidates):
            if used[i]:
                continue
            start, end = segments[i]
            if _same(point, start):
                return i, False
            if _same(point, end):
                return i, True
        return None

    polylines: list[list[tuple[float, float]]] = []
    for i in range(n):
        if used[i]:
            continue
        used[i] = True
        line = [segments[i][0], segments[i][1]]
        while True:
            hit = _find(line[-1])
            if hit is None:
                break
            k, rev = hit
            used[k] = True
            line.append(segments[k][0] if rev else segments[k][1])
        while True:
            hit = _find(line[0])
            if hit is None:
                break
            k, rev = hit
            used[k] = True
            line.insert(0, segments[k][0] if rev else segments[k][1])
        polylines.append(line)
    return polylines


__all__ = ["CONNECT_TOLERANCE", "Segment", "connect_segments", "marching_squares"]
