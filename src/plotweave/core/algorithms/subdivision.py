"""
どこで: `src/plotweave/core/algorithms/subdivision.py`。
何を: 各辺に等間隔の内点を挿入する（uniform / adaptive）。
なぜ: 後段の変形（twist / displace 等）が滑らかに効くだけの頂点密度を確保するため。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[import-untyped]

SUBDIVISION_MODES: tuple[str, ...] = ("uniform", "adaptive")


def edge_divisions(
    lengths: np.ndarray,
    mode: str,
    divisions: int,
    min_segment_length: float,
    max_divisions: int,
) -> np.ndarray:
    """辺ごとの分割数を返す（1 なら内点なし）。

    adaptive は `floor(length / min_segment_length)` を `[1, max_divisions]` にクランプする。
    """
    lengths = np.asarray(lengths, dtype=np.float64).reshape(-1)
    if mode == "adaptive":
        min_len = float(min_segment_length)
        hi = max(1, int(max_divisions))
        if min_len <= 0.0:
            return np.full(lengths.shape, hi, dtype=np.int64)
        d = np.floor(lengths / min_len).astype(np.int64)
        return np.clip(d, 1, hi)
    return np.full(lengths.shape, max(1, int(divisions)), dtype=np.int64)


@njit(cache=True)  # type: ignore[misc]
def _subdivide_fill(
    starts: np.ndarray,
    ends: np.ndarray,
    divs: np.ndarray,
    out: np.ndarray,
) -> int:
    """各辺の始点と内点を out へ順に書き込み、書き込んだ点数を返す。"""
    k = 0
    for i in range(starts.shape[0]):
        x0 = starts[i, 0]
        y0 = starts[i, 1]
        dx = ends[i, 0] - x0
        dy = ends[i, 1] - y0
        d = divs[i]
        out[k, 0] = x0
        out[k, 1] = y0
        k += 1
        for j in range(1, d):
            t = j / d
            out[k, 0] = x0 + dx * t
            out[k, 1] = y0 + dy * t
            k += 1
    return k


@njit(cache=True)  # type: ignore[misc]
def _interior_fill(x0: float, y0: float, x1: float, y1: float, d: int, out: np.ndarray) -> None:
    dx = x1 - x0
    dy = y1 - y0
    for j in range(1, d):
        t = j / d
        out[j - 1, 0] = x0 + dx * t
        out[j - 1, 1] = y0 + dy * t


def subdivide_coords(
    coords: np.ndarray,
    closed: bool,
    *,
    mode: str = "uniform",
    divisions: int = 5,
    min_segment_length: float = 1.0,
    max_divisions: int = 20,
) -> np.ndarray:
    """頂点列を細分化する。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2)。N < 2 はそのまま返す。
    closed : bool
        True なら終点→始点の閉じ辺にも内点を挿入する（終点の後ろに追加）。
        閉じ辺の長さが 0（終点が始点を再訪している）なら何も足さない。
    mode : {"uniform", "adaptive"}
        分割数の決め方。
    divisions : int
        uniform の分割数。1 以下は内点なし。
    min_segment_length, max_divisions
        adaptive のパラメータ。

    Returns
    -------
    np.ndarray
        細分化後の座標。開パス・uniform・分割数 d で `(N - 1) * d + 1` 点。
    """
    v = np.ascontiguousarray(np.asarray(coords, dtype=np.float64).reshape(-1, 2))
    n = int(v.shape[0])
    if n < 2:
        return v

    starts = np.ascontiguousarray(v[:-1])
    ends = np.ascontiguousarray(v[1:])
    lengths = np.sqrt(np.sum((ends - starts) ** 2, axis=1))
    divs = edge_divisions(lengths, mode, divisions, min_segment_length, max_divisions)

    total = int(divs.sum()) + 1
    out = np.empty((total, 2), dtype=np.float64)
    k = int(_subdivide_fill(starts, ends, divs, out))
    out[k] = v[-1]
    result = out[: k + 1]

    if closed:
        closing = float(np.hypot(v[0, 0] - v[-1, 0], v[0, 1] - v[-1, 1]))
        if closing > 0.0:
            d = int(
                edge_divisions(
                    np.array([closing]), mode, divisions, min_segment_length, max_divisions
                )[0]
            )
            if d > 1:
                extra = np.empty((d - 1, 2), dtype=np.float64)
                _interior_fill(
                    float(v[-1, 0]), float(v[-1, 1]), float(v[0, 0]), float(v[0, 1]), d, extra
                )
                result = np.concatenate([result, extra], axis=0)
    return result


__all__ = ["SUBDIVISION_MODES", "edge_divisions", "subdivide_coords"]
