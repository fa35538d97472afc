"""Chaikin の角切りによるポリライン平滑化。"""

from __future__ import annotations

import numpy as np

from plotweave.core.falloff import FalloffParams, blend_coords, falloff_strengths
from plotweave.core.model import CanvasSettings, Path


def _interleave(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    out = np.empty((a.shape[0] * 2, 2), dtype=np.float64)
    out[0::2] = a
    out[1::2] = b
    return out


def chaikin_iteration(
    coords: np.ndarray,
    closed: bool,
    preserve_end_segments: bool = False,
) -> np.ndarray:
    """Chaikin を 1 回適用した座標を返す。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2)。N < 2 はそのまま返す。
    closed : bool
        True なら終点→始点の辺も含めて全辺を 1/4・3/4 点で置き換える。
    preserve_end_segments : bool
        開パスで、先頭 2 点と末尾 2 点を平滑化せずに残す。

    Returns
    -------
    np.ndarray
        平滑化後の座標。開パスでは始点と終点を必ず保持する。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    n = int(v.shape[0])
    if n < 2:
        return v

    if closed:
        nxt = np.roll(v, -1, axis=0)
        return _interleave(0.75 * v + 0.25 * nxt, 0.25 * v + 0.75 * nxt)

    p0 = v[:-1]
    p1 = v[1:]
    q = 0.75 * p0 + 0.25 * p1
    r = 0.25 * p0 + 0.75 * p1

    if preserve_end_segments and n >= 3:
        # 先頭辺・末尾辺は触らず、その隣の辺も外側の切り点を省く。
        middle = _interleave(q[1 : n - 2], r[1 : n - 2])[1:-1]
        return np.concatenate([v[:2], middle, v[n - 2 :]], axis=0)

    middle = _interleave(q, r)[1:-1]
    return np.concatenate([v[:1], middle, v[n - 1 :]], axis=0)


def chaikin_smooth(
    coords: np.ndarray,
    closed: bool,
    iterations: int,
    preserve_end_segments: bool = False,
) -> np.ndarray:
    """`chaikin_iteration` を iterations 回繰り返す。"""
    out = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    for _ in range(max(0, int(iterations))):
        out = chaikin_iteration(out, closed, preserve_end_segments)
    return out


def resample_by_index(coords: np.ndarray, count: int) -> np.ndarray:
    """元の頂点列を「インデックス比」で count 点に線形補間する。

    i 番目の出力は元パス上のインデックス位置 `i / (count - 1) * (N - 1)` の点。
    弧長ではなくインデックス基準の近似である。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    n = int(v.shape[0])
    m = int(count)
    if m <= 0 or n == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if m == 1 or n == 1:
        return np.repeat(v[:1], m, axis=0)

    t = np.arange(m, dtype=np.float64) / (m - 1)
    idx = t * (n - 1)
    lo = np.floor(idx).astype(np.int64)
    lo = np.minimum(lo, n - 1)
    hi = np.minimum(lo + 1, n - 1)
    frac = (idx - lo)[:, None]
    return v[lo] + (v[hi] - v[lo]) * frac


def smooth_path(
    path: Path,
    iterations: int,
    preserve_end_segments: bool,
    falloff: FalloffParams,
    canvas: CanvasSettings,
) -> Path:
    """パスを平滑化し、falloff 有効時は元形状と補間する。

    強度は平滑化後の各点で評価し、対応する元の点はインデックス比で求める。
    """
    if len(path) < 2:
        return path

    smoothed = chaikin_smooth(path.coords, path.closed, iterations, preserve_end_segments)
    if not falloff.enabled:
        return path.with_coords(smoothed)

    original = resample_by_index(path.coords, int(smoothed.shape[0]))
    strength = falloff_strengths(smoothed, falloff, canvas)
    return path.with_coords(blend_coords(original, smoothed, strength))


__all__ = ["chaikin_iteration", "chaikin_smooth", "resample_by_index", "smooth_path"]
