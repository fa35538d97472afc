# src/plotweave/core/stats.py
# Layer 列からプロット統計（本数・頂点数・描画距離・移動距離・所要時間）を求める。

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from plotweave.core.geometry import path_length
from plotweave.core.model import Layer, iter_paths

DEFAULT_PLOT_SPEED_MM_S = 50.0


@dataclass(frozen=True, slots=True)
class PlotStats:
    """プロット統計。

    Attributes
    ----------
    path_count : int
        全パスの本数（縮退パスも含む）。
    point_count : int
        全パスの頂点数。
    draw_distance : float
        ペンを下ろして描く距離 [mm]。隣接頂点間の距離の和で、閉パスの閉じ辺は含めない。
    travel_distance : float
        原点から描画順に各パス始点へペンを上げて移動する距離 [mm]。
        各パスの後はペンがそのパスの最終頂点にあるものとする（閉パスでも始点へは戻らない）。
    estimated_seconds : float
        `(draw + travel) / speed` による所要時間の見積もり。
    """

    path_count: int
    point_count: int
    draw_distance: float
    travel_distance: float
    estimated_seconds: float


def plot_stats(layers: Iterable[Layer], *, speed_mm_s: float = DEFAULT_PLOT_SPEED_MM_S) -> PlotStats:
    """Layer 列のプロット統計を返す。

    空のパスは本数にだけ数え、移動距離の計算では飛ばす。1 点のパスも移動先として数える。
    """
    if speed_mm_s <= 0.0:
        raise ValueError(f"speed_mm_s は正の値である必要がある: got={speed_mm_s}")

    path_count = 0
    point_count = 0
    draw = 0.0
    travel = 0.0
    pen = np.zeros(2, dtype=np.float64)
    for path in iter_paths(layers):
        v = path.coords
        point_count += int(v.shape[0])
        path_count += 1
        if v.shape[0] == 0:
            continue
        travel += float(np.hypot(*(v[0] - pen)))
        draw += path_length(v)
        pen = v[-1]

    return PlotStats(
        path_count=path_count,
        point_count=point_count,
        draw_distance=draw,
        travel_distance=travel,
        estimated_seconds=(draw + travel) / float(speed_mm_s),
    )


__all__ = ["DEFAULT_PLOT_SPEED_MM_S", "PlotStats", "plot_stats"]
