"""core.modifiers.attractor をテスト。"""

from __future__ import annotations

import numpy as np

from plotweave.core.builtins import ensure_builtin_units_registered
from plotweave.core.context import make_context
from plotweave.core.model import CanvasSettings, Layer, Path
from plotweave.core.modifiers.attractor import attractor
from plotweave.core.unit_registry import unit_registry

CANVAS = CanvasSettings(200.0, 200.0)


def _points(*pts: tuple[float, float]) -> list[Layer]:
    return [Layer("a", (Path(np.array(pts, dtype=np.float64)),))]


def test_single_attractor_pulls_within_radius() -> None:
    ctx = make_context(CANVAS, 0)
    out = attractor(_points((150.0, 100.0), (100.0, 250.0), (100.0, 100.0)), ctx, falloff="linear")
    np.testing.assert_allclose(
        out[0].paths[0].coords, [[137.5, 100.0], [100.0, 250.0], [100.0, 100.0]]
    )


def test_falloff_kinds() -> None:
    ctx = make_context(CANVAS, 0)
    smooth = attractor(_points((150.0, 100.0)), ctx, falloff="smooth")
    np.testing.assert_allclose(smooth[0].paths[0].coords, [[137.5, 100.0]])
    quad = attractor(_points((150.0, 100.0)), ctx, falloff="quadratic")
    np.testing.assert_allclose(quad[0].paths[0].coords, [[143.75, 100.0]])


def test_negative_strength_repels() -> None:
    ctx = make_context(CANVAS, 0)
    out = attractor(_points((150.0, 100.0)), ctx, strength=-50.0, falloff="linear")
    np.testing.assert_allclose(out[0].paths[0].coords, [[162.5, 100.0]])


def test_multi_mode_symmetric_pulls_cancel() -> None:
    ctx = make_context(CANVAS, 0)
    out = attractor(
        _points((100.0, 100.0)), ctx, mode="multi", attractor_count=4, multi_radius=50.0
    )
    np.testing.assert_allclose(out[0].paths[0].coords, [[100.0, 100.0]], atol=1e-9)


def test_translate_mode_moves_whole_path() -> None:
    ctx = make_context(CANVAS, 0)
    out = attractor(
        _points((140.0, 100.0), (160.0, 100.0)), ctx, falloff="linear", transform_mode="translate"
    )
    np.testing.assert_allclose(out[0].paths[0].coords, [[127.5, 100.0], [147.5, 100.0]])


def test_falloff_param_is_a_plain_string_in_registry() -> None:
    ensure_builtin_units_registered()
    spec = unit_registry.get("attractor")
    assert spec.uses_falloff is False
    assert spec.defaults["falloff"] == "smooth"
    assert "enable_falloff" not in spec.defaults
