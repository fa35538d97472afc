"""
どこで: `src/plotweave/plotprep/join.py`。
何を: 端点が近いパス同士を貪欲に 1 本へつなぎ、端が重なったものを閉パスにする。
なぜ: ペンの上げ下げ回数を減らすため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from plotweave.core.model import Layer, Path


def _dist(a: np.ndarray, b: np.ndarray) -> float:
    return math.hypot(float(a[0] - b[0]), float(a[1] - b[1]))


def _concat(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    # 継ぎ目は first の終点を残し、second の始点を捨てる。
    return np.concatenate([first, second[1:]], axis=0)


def join_paths(paths: Sequence[Path], tolerance: float) -> list[Path]:
    """端点距離が tolerance 以下のパスを連結する。

    Parameters
    ----------
    paths : Sequence[Path]
        入力パス。0 点のパスは端点を持たないので捨てる。
    tolerance : float
        端点を同一とみなす距離 [mm]。

    Returns
    -------
    list[Path]
        連結後のパス。先頭から順に未使用のパスを起点にする。

    Notes
    -----
    起点パスに対し、未使用の候補を先頭から見て次の 4 通りを順に試し、最初に当たったものを
    つないでから候補の走査をやり直す。

    1. 現在の終点 → 候補の始点
    2. 現在の終点 → 候補の終点（候補を反転して後ろへ）
    3. 候補の終点 → 現在の始点（候補を前へ）
    4. 候補の始点 → 現在の始点（候補を反転して前へ）

    連結結果の closed は両者の論理和。伸ばし終えたパスが 3 点以上で始点と終点が
    tolerance 以内なら、終点を落として closed にする。
    """
    work = [p for p in paths if len(p) > 0]
    used = [False] * len(work)
    out: list[Path] = []

    for i, path in enumerate(work):
        if used[i]:
            continue
        used[i] = True
        cur = path.coords
        closed = path.closed

        changed = True
        while changed:
            changed = False
            cur_start = cur[0]
            cur_end = cur[-1]
            for j, cand in enumerate(work):
                if used[j]:
                    continue
                c = cand.coords
                if _dist(cur_end, c[0]) <= tolerance:
                    cur = _concat(cur, c)
                elif _dist(cur_end, c[-1]) <= tolerance:
                    cur = _concat(cur, c[::-1])
                elif _dist(c[-1], cur_start) <= tolerance:
                    cur = _concat(c, cur)
                elif _dist(c[0], cur_start) <= tolerance:
                    cur = _concat(c[::-1], cur)
                else:
                    continue
                used[j] = True
                closed = closed or cand.closed
                changed = True
                break

        if cur.shape[0] >= 3 and _dist(cur[0], cur[-1]) <= tolerance:
            cur = cur[:-1]
            closed = True
        out.append(Path(cur, closed=closed))
    return out


def join_layers(layers: Sequence[Layer], tolerance: float) -> list[Layer]:
    """Layer ごとに `join_paths` を掛ける（Layer をまたいではつながない）。"""
    return [layer.with_paths(join_paths(layer.paths, tolerance)) for layer in layers]


__all__ = ["join_layers", "join_paths"]
