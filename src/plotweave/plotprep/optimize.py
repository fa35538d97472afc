"""
どこで: `src/plotweave/plotprep/optimize.py`。
何を: 間引き → 端点結合 → 描画順の並べ替えを設定に従って順に掛け、前後の統計を返す。
なぜ: プロッタへ渡す直前の整形を 1 回の呼び出しで済ませ、効果を数字で確かめられるようにするため。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from plotweave.core.model import Layer
from plotweave.core.stats import DEFAULT_PLOT_SPEED_MM_S, PlotStats, plot_stats
from plotweave.plotprep.join import join_layers
from plotweave.plotprep.order import order_layers
from plotweave.plotprep.simplify import simplify_layers

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OptimizationSettings:
    """プロット前整形の設定。

    Attributes
    ----------
    simplify_enabled, simplify_tolerance:
        RDP 間引きの有無と許容誤差 [mm]。
    join_enabled, join_tolerance:
        端点結合の有無と端点を同一とみなす距離 [mm]。
    order_enabled:
        最近傍法による並べ替えの有無。有効なら出力は "optimized" Layer 1 枚になる。
    """

    simplify_enabled: bool = True
    simplify_tolerance: float = 0.1
    join_enabled: bool = True
    join_tolerance: float = 0.5
    order_enabled: bool = True


@dataclass(frozen=True, slots=True)
class OptimizationResult:
    """整形後の Layer 列と、整形前後のプロット統計。"""

    layers: list[Layer]
    before: PlotStats
    after: PlotStats


def optimize_layers(
    layers: Sequence[Layer],
    settings: OptimizationSettings | None = None,
    *,
    speed_mm_s: float = DEFAULT_PLOT_SPEED_MM_S,
) -> OptimizationResult:
    """Layer 列をプロッタ向けに整形する。

    Parameters
    ----------
    layers : Sequence[Layer]
        パイプラインの出力。変更しない。
    settings : OptimizationSettings | None
        None なら既定値。
    speed_mm_s : float
        所要時間の見積もりに使う速度 [mm/s]。

    Returns
    -------
    OptimizationResult
        before は入力、after は整形後の Layer 列から求めた統計。
    """
    s = OptimizationSettings() if settings is None else settings
    before = plot_stats(layers, speed_mm_s=speed_mm_s)

    result = list(layers)
    if s.simplify_enabled:
        result = simplify_layers(result, float(s.simplify_tolerance))
    if s.join_enabled:
        result = join_layers(result, float(s.join_tolerance))
    if s.order_enabled:
        result = order_layers(result)

    after = plot_stats(result, speed_mm_s=speed_mm_s)
    _logger.debug(
        "plotprep: paths %d -> %d, points %d -> %d, travel %.1f -> %.1f",
        before.path_count,
        after.path_count,
        before.point_count,
        after.point_count,
        before.travel_distance,
        after.travel_distance,
    )
    return OptimizationResult(layers=result, before=before, after=after)


__all__ = ["OptimizationResult", "OptimizationSettings", "optimize_layers"]
