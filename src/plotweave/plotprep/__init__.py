"""
どこで: `plotweave.plotprep` サブパッケージ。
何を: パイプライン出力をプロッタ向けに整える（間引き → 端点結合 → 描画順の並べ替え）。
"""

from plotweave.plotprep.join import join_layers, join_paths
from plotweave.plotprep.optimize import OptimizationResult, OptimizationSettings, optimize_layers
from plotweave.plotprep.order import order_layers, order_paths
from plotweave.plotprep.simplify import rdp_simplify, simplify_layers, simplify_path

__all__ = [
    "OptimizationResult",
    "OptimizationSettings",
    "join_layers",
    "join_paths",
    "optimize_layers",
    "order_layers",
    "order_paths",
    "rdp_simplify",
    "simplify_layers",
    "simplify_path",
]
