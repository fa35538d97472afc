"""
どこで: `src/plotweave/plotprep/simplify.py`。
何を: Ramer-Douglas-Peucker 法でポリラインの頂点を間引く。
なぜ: 見た目が変わらない範囲で頂点数を減らし、プロッタへ送るコマンド数を抑えるため。
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from plotweave.core.model import Layer, Path


def _perpendicular_distances(inner: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """start-end を通る直線から各点への距離。start == end なら点間距離。"""
    dx = float(end[0] - start[0])
    dy = float(end[1] - start[1])
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return np.hypot(inner[:, 0] - start[0], inner[:, 1] - start[1])
    num = np.abs(dy * inner[:, 0] - dx * inner[:, 1] + end[0] * start[1] - end[1] * start[0])
    return num / np.sqrt(length_sq)


def rdp_simplify(coords: np.ndarray, epsilon: float) -> np.ndarray:
    """RDP で間引いた頂点列を返す。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2)。3 点未満はそのまま返す。
    epsilon : float
        許容誤差 [mm]。区間内の最大距離がこれを超えた点で分割する（等しければ分割しない）。

    Notes
    -----
    最大距離の点が複数あれば最初の点で分割する。再帰の代わりに区間スタックで
    残す頂点のマスクを作るので、長いパスでも再帰の深さに制限されない。
    """
    if epsilon < 0.0:
        raise ValueError(f"epsilon は 0 以上である必要がある: got={epsilon}")
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    n = int(v.shape[0])
    if n < 3:
        return v

    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[n - 1] = True
    stack: list[tuple[int, int]] = [(0, n - 1)]
    while stack:
        lo, hi = stack.pop()
        if hi - lo < 2:
            continue
        d = _perpendicular_distances(v[lo + 1 : hi], v[lo], v[hi])
        k = int(np.argmax(d))
        if float(d[k]) > epsilon:
            mid = lo + 1 + k
            keep[mid] = True
            stack.append((lo, mid))
            stack.append((mid, hi))
    return v[keep]


def simplify_path(path: Path, epsilon: float) -> Path:
    """1 本のパスを間引く。3 点未満はそのまま、closed は保つ。"""
    if len(path) < 3:
        return path
    return path.with_coords(rdp_simplify(path.coords, epsilon))


def simplify_layers(layers: Sequence[Layer], epsilon: float) -> list[Layer]:
    """全パスを間引き、2 点未満になったパスを捨てる。Layer の並びと id は保つ。"""
    out: list[Layer] = []
    for layer in layers:
        paths = (simplify_path(p, epsilon) for p in layer.paths)
        out.append(layer.with_paths(p for p in paths if len(p) >= 2))
    return out


__all__ = ["rdp_simplify", "simplify_layers", "simplify_path"]
