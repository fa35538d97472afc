"""
どこで: `src/plotweave/core/geometry.py`。
何を: 距離・基本パス生成・アフィン変換・クリッピング・弧長サンプリング・2D ノイズを提供する。
なぜ: generator / modifier から共通の幾何処理を切り出し、各 unit を薄く保つため。

座標は全て float64 配列 `(N, 2)` で扱い、入力配列は変更しない。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from plotweave.core.model import Path, Point

_CLIP_EDGE_EPS = 1e-3
_PARALLEL_EPS = 1e-4


def distance(p1: Point, p2: Point) -> float:
    """2 点間のユークリッド距離。"""
    return math.hypot(float(p2[0]) - float(p1[0]), float(p2[1]) - float(p1[1]))


def lerp(a: float, b: float, t: float) -> float:
    return float(a) + (float(b) - float(a)) * float(t)


def clamp(v: float, lo: float, hi: float) -> float:
    return max(float(lo), min(float(hi), float(v)))


# ---------------------------------------------------------------------------
# パス生成
# ---------------------------------------------------------------------------


def line_path(x1: float, y1: float, x2: float, y2: float) -> Path:
    """2 点の開パスを返す。"""
    return Path(np.array([[x1, y1], [x2, y2]], dtype=np.float64), closed=False)


def circle_coords(cx: float, cy: float, r: float, segments: int = 64) -> np.ndarray:
    """円周上の `segments + 1` 点（始点を終端で再訪）を返す。"""
    seg = max(1, int(segments))
    angle = np.arange(seg + 1, dtype=np.float64) / seg * (2.0 * np.pi)
    out = np.empty((seg + 1, 2), dtype=np.float64)
    out[:, 0] = float(cx) + np.cos(angle) * float(r)
    out[:, 1] = float(cy) + np.sin(angle) * float(r)
    return out


def circle_path(cx: float, cy: float, r: float, segments: int = 64) -> Path:
    """閉じた円パスを返す。"""
    return Path(circle_coords(cx, cy, r, segments), closed=True)


def arc_coords(
    cx: float,
    cy: float,
    r: float,
    start_rad: float,
    end_rad: float,
    segments: int,
) -> np.ndarray:
    """`start_rad` から `end_rad` までの円弧を `segments + 1` 点で返す。"""
    seg = max(1, int(segments))
    angle = float(start_rad) + (np.arange(seg + 1, dtype=np.float64) / seg) * (
        float(end_rad) - float(start_rad)
    )
    out = np.empty((seg + 1, 2), dtype=np.float64)
    out[:, 0] = float(cx) + np.cos(angle) * float(r)
    out[:, 1] = float(cy) + np.sin(angle) * float(r)
    return out


def rect_path(x: float, y: float, w: float, h: float) -> Path:
    """左上 (x, y) と幅高さから閉じた矩形パス（5 点）を返す。"""
    coords = np.array(
        [[x, y], [x + w, y], [x + w, y + h], [x, y + h], [x, y]],
        dtype=np.float64,
    )
    return Path(coords, closed=True)


# ---------------------------------------------------------------------------
# 変換
# ---------------------------------------------------------------------------


def translate_coords(coords: np.ndarray, dx: float, dy: float) -> np.ndarray:
    return np.asarray(coords, dtype=np.float64) + np.array([dx, dy], dtype=np.float64)


def rotate_coords(
    coords: np.ndarray,
    angle_rad: float,
    cx: float = 0.0,
    cy: float = 0.0,
) -> np.ndarray:
    """(cx, cy) を中心に angle_rad だけ回転した座標を返す。"""
    v = np.asarray(coords, dtype=np.float64)
    c = math.cos(float(angle_rad))
    s = math.sin(float(angle_rad))
    dx = v[:, 0] - float(cx)
    dy = v[:, 1] - float(cy)
    out = np.empty_like(v)
    out[:, 0] = float(cx) + dx * c - dy * s
    out[:, 1] = float(cy) + dx * s + dy * c
    return out


def scale_coords(
    coords: np.ndarray,
    sx: float,
    sy: float,
    cx: float = 0.0,
    cy: float = 0.0,
) -> np.ndarray:
    """(cx, cy) を中心に軸別スケールした座標を返す。"""
    v = np.asarray(coords, dtype=np.float64)
    center = np.array([cx, cy], dtype=np.float64)
    return center + (v - center) * np.array([sx, sy], dtype=np.float64)


def centroid(coords: np.ndarray) -> Point:
    """頂点の算術平均。空なら (0, 0)。"""
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    if v.shape[0] == 0:
        return (0.0, 0.0)
    m = v.mean(axis=0)
    return (float(m[0]), float(m[1]))


# ---------------------------------------------------------------------------
# 弧長
# ---------------------------------------------------------------------------


def segment_lengths(coords: np.ndarray) -> np.ndarray:
    """隣接頂点間の距離 shape (N-1,)。"""
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    if v.shape[0] < 2:
        return np.zeros((0,), dtype=np.float64)
    d = np.diff(v, axis=0)
    return np.sqrt(np.sum(d * d, axis=1))


def path_length(coords: np.ndarray) -> float:
    """開ポリラインとしての総長（closed の閉じ辺は含めない）。"""
    return float(segment_lengths(coords).sum())


def points_at_distances(coords: np.ndarray, distances: np.ndarray) -> np.ndarray:
    """弧長位置ごとの補間点を返す。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2)、N >= 1。
    distances : np.ndarray
        始点からの弧長。総長を超えた値は終点、負値は始点に張り付く。

    Returns
    -------
    np.ndarray
        shape (M, 2)。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    d = np.asarray(distances, dtype=np.float64).reshape(-1)
    if v.shape[0] == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if v.shape[0] == 1:
        return np.repeat(v, d.shape[0], axis=0)

    cum = np.concatenate([[0.0], np.cumsum(segment_lengths(v))])
    out = np.empty((d.shape[0], 2), dtype=np.float64)
    out[:, 0] = np.interp(d, cum, v[:, 0])
    out[:, 1] = np.interp(d, cum, v[:, 1])
    return out


# ---------------------------------------------------------------------------
# クリッピング
# ---------------------------------------------------------------------------


def _segment_intersection(
    p1: np.ndarray,
    p2: np.ndarray,
    p3: tuple[float, float],
    p4: tuple[float, float],
) -> tuple[float, float] | None:
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])
    x3, y3 = p3
    x4, y4 = p4
    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < _PARALLEL_EPS:
        return None
    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def _rect_crossing(
    p1: np.ndarray,
    p2: np.ndarray,
    rx: float,
    ry: float,
    rw: float,
    rh: float,
) -> tuple[float, float] | None:
    edges = (
        ((rx, ry), (rx + rw, ry)),
        ((rx + rw, ry), (rx + rw, ry + rh)),
        ((rx, ry + rh), (rx + rw, ry + rh)),
        ((rx, ry), (rx, ry + rh)),
    )
    best: tuple[float, float] | None = None
    best_d = math.inf
    for a, b in edges:
        pt = _segment_intersection(p1, p2, a, b)
        if pt is None:
            continue
        d = math.hypot(pt[0] - float(p1[0]), pt[1] - float(p1[1]))
        if _CLIP_EDGE_EPS < d < best_d:
            best_d = d
            best = pt
    return best


def _circle_crossing(
    p1: np.ndarray,
    p2: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
) -> tuple[float, float] | None:
    dx = float(p2[0]) - float(p1[0])
    dy = float(p2[1]) - float(p1[1])
    fx = float(p1[0]) - cx
    fy = float(p1[1]) - cy
    a = dx * dx + dy * dy
    if a == 0.0:
        return None
    b = 2.0 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return None
    sq = math.sqrt(disc)
    t1 = (-b - sq) / (2.0 * a)
    t2 = (-b + sq) / (2.0 * a)
    if 0.0 <= t1 <= 1.0:
        t = t1
    elif 0.0 <= t2 <= 1.0:
        t = t2
    else:
        d1 = min(abs(t1), abs(t1 - 1.0))
        d2 = min(abs(t2), abs(t2 - 1.0))
        t = clamp(t1, 0.0, 1.0) if d1 < d2 else clamp(t2, 0.0, 1.0)
    return (float(p1[0]) + t * dx, float(p1[1]) + t * dy)


def _clip_walk(coords: np.ndarray, inside: np.ndarray, crossing) -> list[Path]:
    """inside マスクに沿って頂点列を歩き、領域内の開区間をパスとして切り出す。"""
    out: list[Path] = []
    current: list[tuple[float, float]] = []
    n = int(coords.shape[0])
    for i in range(n):
        curr = coords[i]
        curr_in = bool(inside[i])
        prev_in = bool(inside[i - 1]) if i > 0 else False
        if curr_in:
            if i > 0 and not prev_in:
                pt = crossing(coords[i - 1], curr)
                if pt is not None:
                    current.append(pt)
            current.append((float(curr[0]), float(curr[1])))
        elif i > 0 and prev_in:
            pt = crossing(coords[i - 1], curr)
            if pt is not None:
                current.append(pt)
            if len(current) >= 2:
                out.append(Path.from_points(current, closed=False))
            current = []
    if len(current) >= 2:
        out.append(Path.from_points(current, closed=False))
    return out


def clip_path_to_rect(path: Path, rx: float, ry: float, rw: float, rh: float) -> list[Path]:
    """パスを矩形でクリップし、内側に残る開パス群を返す。

    Notes
    -----
    出力は常に open。2 点未満の区間は捨てる。
    閉パスの暗黙の閉じ辺は考慮しない（頂点列を順に歩くだけ）。
    """
    v = path.coords
    if v.shape[0] == 0:
        return []
    inside = (v[:, 0] >= rx) & (v[:, 0] <= rx + rw) & (v[:, 1] >= ry) & (v[:, 1] <= ry + rh)
    return _clip_walk(v, inside, lambda a, b: _rect_crossing(a, b, rx, ry, rw, rh))


def clip_path_to_circle(
    path: Path,
    cx: float,
    cy: float,
    radius: float,
    invert: bool = False,
) -> list[Path]:
    """パスを円でクリップする。invert=True なら円の外側を残す。"""
    v = path.coords
    if v.shape[0] == 0:
        return []
    d = np.hypot(v[:, 0] - cx, v[:, 1] - cy)
    inside = d > radius if invert else d <= radius
    return _clip_walk(v, inside, lambda a, b: _circle_crossing(a, b, cx, cy, radius))


# ---------------------------------------------------------------------------
# ノイズ
# ---------------------------------------------------------------------------


@njit(cache=True)  # type: ignore[misc]
def _to_i32(h: int) -> int:
    h = h & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


@njit(cache=True)  # type: ignore[misc]
def _hash2(xi: int, yi: int, seed: int) -> int:
    h = _to_i32(seed + xi * 374761393 + yi * 668265263)
    # 乗算結果は倍精度へ丸めてから 32bit へ切り詰める（2^53 超の下位ビットは落ちる）。
    h = _to_i32(int(float((h ^ (h >> 13)) * 1274126177)))
    return h ^ (h >> 16)


@njit(cache=True)  # type: ignore[misc]
def _grad(h: int, dx: float, dy: float) -> float:
    k = h & 7
    u = dx if k < 4 else dy
    v = dy if k < 4 else dx
    a = -u if (k & 1) else u
    b = -2.0 * v if (k & 2) else 2.0 * v
    return a + b


@njit(cache=True)  # type: ignore[misc]
def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@njit(cache=True)  # type: ignore[misc]
def noise2d_kernel(x: float, y: float, seed: int) -> float:
    """格子ハッシュ勾配ノイズ 1 点分（値域はおおむね [0, 1]）。njit 関数から呼べる。"""
    xi = int(math.floor(x))
    yi = int(math.floor(y))
    xf = x - xi
    yf = y - yi
    u = _fade(xf)
    v = _fade(yf)
    n00 = _grad(_hash2(xi, yi, seed), xf, yf)
    n10 = _grad(_hash2(xi + 1, yi, seed), xf - 1.0, yf)
    n01 = _grad(_hash2(xi, yi + 1, seed), xf, yf - 1.0)
    n11 = _grad(_hash2(xi + 1, yi + 1, seed), xf - 1.0, yf - 1.0)
    nx0 = n00 + (n10 - n00) * u
    nx1 = n01 + (n11 - n01) * u
    return (nx0 + (nx1 - nx0) * v) * 0.5 + 0.5


@njit(cache=True)  # type: ignore[misc]
def _noise2d_fill(xs: np.ndarray, ys: np.ndarray, seed: int, out: np.ndarray) -> None:
    for i in range(xs.shape[0]):
        out[i] = noise2d_kernel(xs[i], ys[i], seed)


def noise2d_array(xs: np.ndarray, ys: np.ndarray, seed: int) -> np.ndarray:
    """`noise2d` の配列版。xs と ys は同じ長さの 1 次元配列。"""
    x = np.ascontiguousarray(np.asarray(xs, dtype=np.float64).reshape(-1))
    y = np.ascontiguousarray(np.asarray(ys, dtype=np.float64).reshape(-1))
    if x.shape != y.shape:
        raise ValueError(f"xs と ys の長さが一致しない: {x.shape} != {y.shape}")
    out = np.empty(x.shape, dtype=np.float64)
    if x.shape[0] > 0:
        _noise2d_fill(x, y, int(seed) & 0xFFFFFFFF, out)
    return out


def noise2d(x: float, y: float, seed: int) -> float:
    """決定論的な 2D 勾配ノイズ。"""
    return float(noise2d_array(np.array([x]), np.array([y]), seed)[0])


def fbm_array(
    xs: np.ndarray,
    ys: np.ndarray,
    scale: float,
    octaves: int,
    seed: int,
) -> np.ndarray:
    """オクターブ合成したノイズを振幅和で正規化して返す（値域は noise2d と同程度）。

    オクターブ i のシードは `seed + i * 100`。周波数は 2 倍、振幅は 1/2 ずつ変える。
    octaves < 1 は 1 として扱う。
    """
    x = np.asarray(xs, dtype=np.float64).reshape(-1)
    y = np.asarray(ys, dtype=np.float64).reshape(-1)
    value = np.zeros(x.shape, dtype=np.float64)
    amp = 1.0
    freq = float(scale)
    total = 0.0
    for i in range(max(1, int(octaves))):
        value += noise2d_array(x * freq, y * freq, int(seed) + i * 100) * amp
        total += amp
        amp *= 0.5
        freq *= 2.0
    return value / total


def fbm(x: float, y: float, scale: float, octaves: int, seed: int) -> float:
    """`fbm_array` の 1 点版。"""
    return float(fbm_array(np.array([x]), np.array([y]), scale, octaves, seed)[0])


__all__ = [
    "arc_coords",
    "centroid",
    "circle_coords",
    "circle_path",
    "clamp",
    "clip_path_to_circle",
    "clip_path_to_rect",
    "distance",
    "fbm",
    "fbm_array",
    "lerp",
    "line_path",
    "noise2d",
    "noise2d_array",
    "noise2d_kernel",
    "path_length",
    "points_at_distances",
    "rect_path",
    "rotate_coords",
    "scale_coords",
    "segment_lengths",
    "translate_coords",
]
