"""
どこで: `src/plotweave/devtools/run_pipeline.py`。
何を: パイプライン定義（YAML）を実行し、Layer ごとのプロット統計を表示する。
なぜ: GUI なしでパイプラインの出力規模と所要時間を確かめられるようにするため。
"""

from __future__ import annotations

import argparse
import sys

from plotweave.core.logging_setup import setup_default_logging
from plotweave.core.model import CanvasSettings
from plotweave.core.pipeline import load_pipeline, run_pipeline
from plotweave.core.runtime_config import runtime_config, set_config_path
from plotweave.core.stats import PlotStats, plot_stats
from plotweave.plotprep import OptimizationSettings, optimize_layers


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m plotweave run")
    p.add_argument("pipeline", help="パイプライン定義 YAML のパス")
    p.add_argument("--seed", type=int, default=None, help="シード（定義・設定より優先）")
    p.add_argument("--strict", action="store_true", help="step の例外をそのまま送出する")
    p.add_argument("--isolate-rng", action="store_true", help="step ごとに乱数源を分ける")
    p.add_argument("--config", default=None, help="config.yaml のパス")
    p.add_argument(
        "--optimize",
        action="store_true",
        help="間引き・端点結合・並べ替えを掛け、前後の統計を表示する",
    )
    p.add_argument("--no-simplify", action="store_true", help="--optimize で間引きを省く")
    p.add_argument("--no-join", action="store_true", help="--optimize で端点結合を省く")
    p.add_argument("--no-order", action="store_true", help="--optimize で並べ替えを省く")
    return p.parse_args(argv)


def _format_total(label: str, s: PlotStats) -> str:
    return (
        f"{label}: paths={s.path_count} points={s.point_count}"
        f" draw={s.draw_distance:.1f} travel={s.travel_distance:.1f}"
        f" time={s.estimated_seconds:.0f}s"
    )


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.config is not None:
        set_config_path(args.config)
    cfg = runtime_config()
    setup_default_logging(cfg.logging_level)

    doc = load_pipeline(args.pipeline)
    canvas = doc.canvas or CanvasSettings(cfg.canvas_width, cfg.canvas_height, cfg.canvas_units)
    seed = args.seed if args.seed is not None else (doc.seed if doc.seed is not None else cfg.seed)

    layers = run_pipeline(
        doc.steps,
        canvas,
        seed,
        strict=bool(args.strict or cfg.strict),
        isolate_rng=bool(args.isolate_rng or cfg.isolate_rng),
    )

    print(f"canvas: {canvas.width:g} x {canvas.height:g} {canvas.units}  seed: {seed}")
    for layer in layers:
        s = plot_stats([layer], speed_mm_s=cfg.plot_speed_mm_s)
        print(
            f"{layer.id}: paths={s.path_count} points={s.point_count}"
            f" draw={s.draw_distance:.1f} travel={s.travel_distance:.1f}"
        )

    if not args.optimize:
        print(_format_total("total", plot_stats(layers, speed_mm_s=cfg.plot_speed_mm_s)))
        return 0

    settings = OptimizationSettings(
        simplify_enabled=not args.no_simplify,
        simplify_tolerance=cfg.plot_simplify_tolerance,
        join_enabled=not args.no_join,
        join_tolerance=cfg.plot_join_tolerance,
        order_enabled=not args.no_order,
    )
    result = optimize_layers(layers, settings, speed_mm_s=cfg.plot_speed_mm_s)
    print(_format_total("before", result.before))
    print(_format_total("after", result.after))
    return 0
