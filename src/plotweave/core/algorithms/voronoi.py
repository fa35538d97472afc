"""
どこで: `src/plotweave/core/algorithms/voronoi.py`。
何を: 母点集合のボロノイ辺（総当たりの垂直二等分線判定）と、Lloyd 緩和用の近似セル重心を求める。
なぜ: 厳密な Fortune 法を使わず、線画として十分な精度の辺を少ない実装量で得るため。

辺の判定
--------
母点ペアごとに垂直二等分線を十分長く伸ばし、矩形へ Cohen-Sutherland でクリップする。
クリップ後の線分上 t=0.5, 0.25, 0.75 の 3 点で、他の母点がペアより 0.1 以上近ければ棄却する。
残った線分は 51 点をサンプルし、他の母点が 0.5 以上近い区間を両端から削る。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

_EDGE_TEST_SLACK = 0.1
_TRIM_SLACK = 0.5
_TRIM_SAMPLES = 50
_CELL_ANGLE_STEP = math.pi / 16.0
_CELL_MARCH_STEP = 5.0

_INSIDE = 0
_LEFT = 1
_RIGHT = 2
_BOTTOM = 4
_TOP = 8
_CLIP_MAX_STEPS = 8


@njit(cache=True)  # type: ignore[misc]
def _out_code(x: float, y: float, min_x: float, min_y: float, max_x: float, max_y: float) -> int:
    code = _INSIDE
    if x < min_x:
        code |= _LEFT
    elif x > max_x:
        code |= _RIGHT
    if y < min_y:
        code |= _BOTTOM
    elif y > max_y:
        code |= _TOP
    return code


@njit(cache=True)  # type: ignore[misc]
def _clip_segment(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    out: np.ndarray,
) -> bool:
    """Cohen-Sutherland。矩形と交わらなければ False。"""
    c1 = _out_code(x1, y1, min_x, min_y, max_x, max_y)
    c2 = _out_code(x2, y2, min_x, min_y, max_x, max_y)
    # 端点 1 つにつき高々 2 回（縦・横）で矩形内に入る。
    for _ in range(_CLIP_MAX_STEPS):
        if (c1 | c2) == 0:
            out[0] = x1
            out[1] = y1
            out[2] = x2
            out[3] = y2
            return True
        if (c1 & c2) != 0:
            return False
        c = c1 if c1 != 0 else c2
        if c & _TOP:
            x = x1 + (x2 - x1) * (max_y - y1) / (y2 - y1)
            y = max_y
        elif c & _BOTTOM:
            x = x1 + (x2 - x1) * (min_y - y1) / (y2 - y1)
            y = min_y
        elif c & _RIGHT:
            y = y1 + (y2 - y1) * (max_x - x1) / (x2 - x1)
            x = max_x
        else:
            y = y1 + (y2 - y1) * (min_x - x1) / (x2 - x1)
            x = min_x
        if c == c1:
            x1 = x
            y1 = y
            c1 = _out_code(x1, y1, min_x, min_y, max_x, max_y)
        else:
            x2 = x
            y2 = y
            c2 = _out_code(x2, y2, min_x, min_y, max_x, max_y)
    return False


@njit(cache=True)  # type: ignore[misc]
def _closer_site_exists(
    sites: np.ndarray, i: int, j: int, px: float, py: float, slack: float
) -> bool:
    d1 = math.sqrt((px - sites[i, 0]) ** 2 + (py - sites[i, 1]) ** 2)
    d2 = math.sqrt((px - sites[j, 0]) ** 2 + (py - sites[j, 1]) ** 2)
    limit = min(d1, d2) - slack
    for k in range(sites.shape[0]):
        if k == i or k == j:
            continue
        dk = math.sqrt((px - sites[k, 0]) ** 2 + (py - sites[k, 1]) ** 2)
        if dk < limit:
            return True
    return False


@njit(cache=True)  # type: ignore[misc]
def _voronoi_edges_kernel(
    sites: np.ndarray,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    extend: float,
    out: np.ndarray,
) -> int:
    n = sites.shape[0]
    seg = np.empty(4, dtype=np.float64)
    count = 0
    for i in range(n):
        for j in range(i + 1, n):
            mx = (sites[i, 0] + sites[j, 0]) / 2.0
            my = (sites[i, 1] + sites[j, 1]) / 2.0
            px = -(sites[j, 1] - sites[i, 1])
            py = sites[j, 0] - sites[i, 0]
            length = math.sqrt(px * px + py * py)
            if length == 0.0:
                continue
            nx = px / length
            ny = py / length
            if not _clip_segment(
                mx - nx * extend,
                my - ny * extend,
                mx + nx * extend,
                my + ny * extend,
                min_x,
                min_y,
                max_x,
                max_y,
                seg,
            ):
                continue
            x1 = seg[0]
            y1 = seg[1]
            x2 = seg[2]
            y2 = seg[3]

            valid = not _closer_site_exists(
                sites, i, j, (x1 + x2) / 2.0, (y1 + y2) / 2.0, _EDGE_TEST_SLACK
            )
            if valid:
                valid = not _closer_site_exists(
                    sites, i, j, x1 + (x2 - x1) * 0.25, y1 + (y2 - y1) * 0.25, _EDGE_TEST_SLACK
                )
            if valid:
                valid = not _closer_site_exists(
                    sites, i, j, x1 + (x2 - x1) * 0.75, y1 + (y2 - y1) * 0.75, _EDGE_TEST_SLACK
                )
            if not valid:
                continue

            t_start = -1.0
            t_end = -1.0
            for s in range(_TRIM_SAMPLES + 1):
                t = s / _TRIM_SAMPLES
                sx = x1 + (x2 - x1) * t
                sy = y1 + (y2 - y1) * t
                if not _closer_site_exists(sites, i, j, sx, sy, _TRIM_SLACK):
                    if t_start < 0.0:
                        t_start = t
                    t_end = t
            if t_start < 0.0 or t_end <= t_start:
                continue
            out[count, 0] = x1 + (x2 - x1) * t_start
            out[count, 1] = y1 + (y2 - y1) * t_start
            out[count, 2] = x1 + (x2 - x1) * t_end
            out[count, 3] = y1 + (y2 - y1) * t_end
            count += 1
    return count


def voronoi_edges(
    sites: np.ndarray,
    bounds: tuple[float, float, float, float],
    extend: float,
) -> np.ndarray:
    """ボロノイ辺を shape (M, 4) `(x1, y1, x2, y2)` で返す（ペア (i, j) の辞書順）。

    Parameters
    ----------
    sites : np.ndarray
        shape (N, 2) の母点。重なった母点のペアは辺を作らない。
    bounds : tuple[float, float, float, float]
        クリップ矩形 `(min_x, min_y, max_x, max_y)`。
    extend : float
        二等分線を中点から両側へ伸ばす長さ。矩形を確実に横切る長さを渡す。
    """
    s = np.ascontiguousarray(np.asarray(sites, dtype=np.float64).reshape(-1, 2))
    n = int(s.shape[0])
    out = np.empty((max(0, n * (n - 1) // 2), 4), dtype=np.float64)
    if n < 2:
        return out[:0]
    min_x, min_y, max_x, max_y = (float(v) for v in bounds)
    count = int(_voronoi_edges_kernel(s, min_x, min_y, max_x, max_y, float(extend), out))
    return out[:count]


@njit(cache=True)  # type: ignore[misc]
def _cell_centroids_kernel(sites: np.ndarray, width: float, height: float, out: np.ndarray) -> None:
    n = sites.shape[0]
    reach = max(width, height)
    two_pi = math.pi * 2.0
    for i in range(n):
        sx = sites[i, 0]
        sy = sites[i, 1]
        sum_x = 0.0
        sum_y = 0.0
        hits = 0
        angle = 0.0
        while angle < two_pi:
            ca = math.cos(angle)
            sa = math.sin(angle)
            dist = 1.0
            while dist < reach:
                px = sx + ca * dist
                py = sy + sa * dist
                best = math.sqrt((px - sx) ** 2 + (py - sy) ** 2)
                closest = i
                for j in range(n):
                    if j == i:
                        continue
                    d = math.sqrt((px - sites[j, 0]) ** 2 + (py - sites[j, 1]) ** 2)
                    if d < best:
                        best = d
                        closest = j
                if closest != i or px < 0.0 or px > width or py < 0.0 or py > height:
                    sum_x += px
                    sum_y += py
                    hits += 1
                    break
                dist += _CELL_MARCH_STEP
            angle += _CELL_ANGLE_STEP
        if hits > 0:
            out[i, 0] = sum_x / hits
            out[i, 1] = sum_y / hits
        else:
            out[i, 0] = 0.0
            out[i, 1] = 0.0


def relax_sites(sites: np.ndarray, width: float, height: float) -> np.ndarray:
    """Lloyd 緩和 1 回分。各母点を近似セル境界点の平均へ移す。

    母点から角度 π/16 刻みの方向へ距離 1 から 5 ずつ進み、別の母点の方が近くなるか
    キャンバス外へ出た最初の点を境界点とする。境界点が 1 つも無い母点は (0, 0) へ移る。
    """
    s = np.ascontiguousarray(np.asarray(sites, dtype=np.float64).reshape(-1, 2))
    out = np.empty_like(s)
    if s.shape[0] > 0:
        _cell_centroids_kernel(s, float(width), float(height), out)
    return out


__all__ = ["relax_sites", "voronoi_edges"]
