"""
どこで: `plotweave` パッケージ。
何を: ペンプロッタ向けの手続き的な線画ジオメトリ（generator / modifier / パイプライン）を提供する。
なぜ: よく使う入口（データモデル・unit 登録・パイプライン実行）を 1 か所から import できるようにするため。
"""

from __future__ import annotations

from plotweave.core.context import ExecutionContext, make_context
from plotweave.core.model import CANVAS_PRESETS, CanvasSettings, Layer, Path
from plotweave.core.pipeline import PipelineStep, load_pipeline, run_pipeline
from plotweave.core.rng import SeededRandom
from plotweave.core.unit_registry import generator, modifier, unit_registry

__version__ = "0.1.0"

__all__ = [
    "CANVAS_PRESETS",
    "CanvasSettings",
    "ExecutionContext",
    "Layer",
    "Path",
    "PipelineStep",
    "SeededRandom",
    "generator",
    "load_pipeline",
    "make_context",
    "modifier",
    "run_pipeline",
    "unit_registry",
]
