"""
どこで: `src/plotweave/core/algorithms/packing.py`。
何を: 棄却サンプリングによる円充填（半径→x→y の順に抽選し、重なれば捨てる）。
なぜ: 試行回数の上限で必ず停止し、部分的な結果も正常な出力として扱うため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from plotweave.core.rng import SeededRandom


@dataclass(frozen=True, slots=True)
class Circle:
    x: float
    y: float
    r: float


@dataclass(frozen=True, slots=True)
class PackResult:
    """充填結果。

    Attributes
    ----------
    circles : tuple[Circle, ...]
        採択された円（採択順）。
    attempts : int
        実際に行った試行回数（`max_attempts` 以下）。
    """

    circles: tuple[Circle, ...]
    attempts: int


def pack_circles(
    rng: SeededRandom,
    bounds: tuple[float, float, float, float],
    *,
    min_radius: float,
    max_radius: float,
    count: int,
    padding: float,
    max_attempts: int,
) -> PackResult:
    """矩形内に重ならない円を詰める。

    Parameters
    ----------
    rng : SeededRandom
        1 試行あたり 3 回（半径, x, y）消費する。
    bounds : tuple[float, float, float, float]
        配置領域 (x, y, w, h)。円は `[x + r, x + w - r]` の範囲に中心を取る。
    min_radius, max_radius : float
        半径の抽選範囲。
    count : int
        目標個数。
    padding : float
        円同士の最小すき間。
    max_attempts : int
        試行回数の上限。

    Returns
    -------
    PackResult
        採択された円と試行回数。
    """
    bx, by, bw, bh = (float(b) for b in bounds)
    lo = float(min_radius)
    hi = float(max_radius)
    pad = float(padding)
    target = max(0, int(count))
    budget = max(0, int(max_attempts))

    xs = np.empty((target,), dtype=np.float64)
    ys = np.empty((target,), dtype=np.float64)
    rs = np.empty((target,), dtype=np.float64)
    n = 0
    attempts = 0
    while n < target and attempts < budget:
        attempts += 1
        r = lo + rng() * (hi - lo)
        x = bx + r + rng() * (bw - 2.0 * r)
        y = by + r + rng() * (bh - 2.0 * r)
        if n > 0:
            d = np.hypot(xs[:n] - x, ys[:n] - y)
            if bool(np.any(d < r + rs[:n] + pad)):
                continue
        xs[n] = x
        ys[n] = y
        rs[n] = r
        n += 1

    circles = tuple(Circle(float(xs[i]), float(ys[i]), float(rs[i])) for i in range(n))
    return PackResult(circles=circles, attempts=attempts)


__all__ = ["Circle", "PackResult", "pack_circles"]
