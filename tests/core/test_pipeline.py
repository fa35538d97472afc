"""core.pipeline をテスト。"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path as FilePath

import numpy as np
import pytest

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import CanvasSettings, Layer
from plotweave.core.pipeline import (
    PipelineStep,
    load_pipeline,
    pipeline_from_dict,
    run_pipeline,
)
from plotweave.core.rng import SeededRandom, derive_seed
from plotweave.core.unit_registry import InputSlot, generator, modifier

CANVAS = CanvasSettings(200.0, 200.0)


@generator(name="_pipe_draw")
def _pipe_draw(ctx: ExecutionContext, *, tag: str = "g") -> Layer:
    # 乱数 1 回分を x 座標に入れて、乱数列の受け渡しを観測する。
    x = ctx.rng()
    return Layer(tag, (line_path(x, 0.0, x, 1.0),))


@modifier(name="_pipe_shift")
def _pipe_shift(layers: Sequence[Layer], ctx: ExecutionContext, *, dx: float = 1.0) -> list[Layer]:
    return [layer.with_paths(p.with_coords(p.coords + [dx, 0.0]) for p in layer.paths) for layer in layers]


@modifier(name="_pipe_fail")
def _pipe_fail(layers: Sequence[Layer], ctx: ExecutionContext) -> list[Layer]:
    raise RuntimeError("boom")


@modifier(name="_pipe_needs_mask", inputs=[InputSlot("mask", optional=False)])
def _pipe_needs_mask(layers: Sequence[Layer], ctx: ExecutionContext) -> list[Layer]:
    return [*layers, *ctx.input_layers("mask")]


def _x(layer: Layer) -> float:
    return float(layer.paths[0].coords[0, 0])


def test_generators_append_and_modifiers_replace() -> None:
    steps = [
        PipelineStep("_pipe_draw", {"tag": "a"}),
        PipelineStep("_pipe_draw", {"tag": "b"}),
        PipelineStep("_pipe_shift", {"dx": 10.0}),
    ]
    out = run_pipeline(steps, CANVAS, 5)
    assert [layer.id for layer in out] == ["a", "b"]
    ref = SeededRandom(5)
    assert _x(out[0]) == pytest.approx(ref() + 10.0)
    assert _x(out[1]) == pytest.approx(ref() + 10.0)


def test_disabled_step_is_skipped_without_consuming_rng() -> None:
    steps = [
        PipelineStep("_pipe_draw", {"tag": "off"}, enabled=False),
        PipelineStep("_pipe_draw", {"tag": "on"}),
    ]
    out = run_pipeline(steps, CANVAS, 5)
    assert [layer.id for layer in out] == ["on"]
    assert _x(out[0]) == SeededRandom(5)()


def test_unknown_unit_is_skipped_or_raised(caplog: pytest.LogCaptureFixture) -> None:
    steps = [PipelineStep("_pipe_missing"), PipelineStep("_pipe_draw")]
    with caplog.at_level(logging.WARNING, logger="plotweave.core.pipeline"):
        out = run_pipeline(steps, CANVAS, 1)
    assert len(out) == 1
    assert "_pipe_missing" in caplog.text

    with pytest.raises(KeyError):
        run_pipeline(steps, CANVAS, 1, strict=True)


def test_failing_step_keeps_previous_layers_unless_strict() -> None:
    steps = [PipelineStep("_pipe_draw", {"tag": "a"}), PipelineStep("_pipe_fail")]
    out = run_pipeline(steps, CANVAS, 1)
    assert [layer.id for layer in out] == ["a"]
    with pytest.raises(RuntimeError, match="boom"):
        run_pipeline(steps, CANVAS, 1, strict=True)


def test_unknown_param_is_reported_in_strict_mode() -> None:
    steps = [PipelineStep("_pipe_draw", {"nope": 1})]
    assert run_pipeline(steps, CANVAS, 1) == []
    with pytest.raises(TypeError):
        run_pipeline(steps, CANVAS, 1, strict=True)


def test_isolated_rng_is_independent_of_order() -> None:
    a = PipelineStep("_pipe_draw", {"tag": "a"}, instance_id="step-a")
    b = PipelineStep("_pipe_draw", {"tag": "b"}, instance_id="step-b")
    ab = run_pipeline([a, b], CANVAS, 9, isolate_rng=True)
    ba = run_pipeline([b, a], CANVAS, 9, isolate_rng=True)
    assert _x(ab[0]) == _x(ba[1])
    assert _x(ab[0]) == SeededRandom(derive_seed(9, "step-a"))()


def test_wiring_and_accumulate_false() -> None:
    steps = [
        PipelineStep("_pipe_draw", {"tag": "mask"}, instance_id="donor", accumulate=False),
        PipelineStep("_pipe_draw", {"tag": "main"}),
        PipelineStep("_pipe_needs_mask", instance_id="m", inputs={"mask": "donor"}),
    ]
    out = run_pipeline(steps, CANVAS, 2)
    assert [layer.id for layer in out] == ["main", "mask"]


def test_wiring_errors_raise_value_error() -> None:
    with pytest.raises(ValueError):
        run_pipeline([PipelineStep("_pipe_needs_mask")], CANVAS, 1)
    with pytest.raises(ValueError):
        run_pipeline([PipelineStep("_pipe_needs_mask", inputs={"mask": "nowhere"})], CANVAS, 1)
    with pytest.raises(ValueError):
        run_pipeline([PipelineStep("_pipe_draw", inputs={"bogus": "x"})], CANVAS, 1)
    with pytest.raises(ValueError):
        run_pipeline(
            [PipelineStep("_pipe_draw", instance_id="x"), PipelineStep("_pipe_draw", instance_id="x")],
            CANVAS,
            1,
        )


def test_builtin_pipeline_runs_end_to_end() -> None:
    steps = [
        PipelineStep("concentric_circles", {"count": 3, "segments": 16}),
        PipelineStep("subdivide", {"divisions": 2}),
        PipelineStep("jitter", {"amount_x": 1.0, "amount_y": 1.0}),
    ]
    a = run_pipeline(steps, CANVAS, 3, strict=True)
    b = run_pipeline(steps, CANVAS, 3, strict=True)
    assert [layer.id for layer in a] == ["concentric"]
    assert len(a[0].paths) == 3
    assert len(a[0].paths[0]) >= 33
    for p, q in zip(a[0].paths, b[0].paths):
        np.testing.assert_array_equal(p.coords, q.coords)


def test_pipeline_from_dict() -> None:
    doc = pipeline_from_dict(
        {
            "seed": 4,
            "canvas": {"width": 100, "height": 50},
            "steps": [
                {"unit": "grid", "params": {"rows": 2}},
                {"unit": "rotate", "enabled": False, "id": "r"},
            ],
        }
    )
    assert doc.seed == 4
    assert doc.canvas == CanvasSettings(100.0, 50.0)
    assert doc.steps[0].unit == "grid"
    assert dict(doc.steps[0].params) == {"rows": 2}
    assert doc.steps[1].enabled is False
    assert doc.steps[1].instance_id == "r"

    preset = pipeline_from_dict({"canvas": "A4", "steps": []})
    assert preset.canvas is not None and preset.canvas.width == 210.0
    assert pipeline_from_dict({"steps": []}).canvas is None


@pytest.mark.parametrize(
    "data",
    [
        None,
        {},
        {"steps": "grid"},
        {"steps": [{"params": {}}]},
        {"steps": [], "canvas": {"preset": "B7"}},
        {"steps": [], "canvas": {"width": 0, "height": 10}},
        {"steps": [], "seed": "x"},
    ],
)
def test_pipeline_from_dict_rejects_malformed(data: object) -> None:
    with pytest.raises(ValueError):
        pipeline_from_dict(data)  # type: ignore[arg-type]


def test_load_pipeline_yaml(tmp_path: FilePath) -> None:
    p = tmp_path / "pipe.yaml"
    p.write_text(
        "\n".join(
            [
                "seed: 7",
                "canvas: {preset: Letter}",
                "steps:",
                "  - unit: spiral",
                "    params: {turns: 2}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    doc = load_pipeline(p)
    assert doc.seed == 7
    assert doc.steps[0].unit == "spiral"

    bad = tmp_path / "bad.yaml"
    bad.write_text("steps: [unit: {", encoding="utf-8")
    with pytest.raises(ValueError):
        load_pipeline(bad)
