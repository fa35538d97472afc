"""rotate / scale / jitter / twist / smooth / subdivide modifier をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from plotweave.core.builtins import ensure_builtin_units_registered
from plotweave.core.context import make_context
from plotweave.core.geometry import line_path
from plotweave.core.model import CanvasSettings, Layer, Path
from plotweave.core.modifiers.jitter import jitter
from plotweave.core.modifiers.rotate import rotate
from plotweave.core.modifiers.scale import scale
from plotweave.core.rng import SeededRandom
from plotweave.core.unit_registry import unit_registry

ensure_builtin_units_registered()

CANVAS = CanvasSettings(200.0, 200.0)


def _layers() -> list[Layer]:
    return [Layer("l", (line_path(100.0, 100.0, 150.0, 100.0),))]


def test_rotate_about_canvas_center() -> None:
    out = rotate(_layers(), make_context(CANVAS, 0), angle=90.0)
    np.testing.assert_allclose(out[0].paths[0].coords, [[100.0, 100.0], [100.0, 150.0]], atol=1e-9)


def test_rotate_zero_is_identity() -> None:
    layers = _layers()
    out = rotate(layers, make_context(CANVAS, 0), angle=0.0)
    assert out[0] is layers[0]


def test_rotate_with_falloff_through_registry() -> None:
    spec = unit_registry.get("rotate")
    out = spec.execute(
        {"angle": 90.0, "enable_falloff": True, "falloff_radius": 25.0},
        _layers(),
        make_context(CANVAS, 0),
    )
    # 中心の点は強度 1、50mm 先の点は強度 0 なので動かない。
    np.testing.assert_allclose(out[0].paths[0].coords, [[100.0, 100.0], [150.0, 100.0]], atol=1e-9)


def test_scale_uniform_and_axis() -> None:
    ctx = make_context(CANVAS, 0)
    out = scale(_layers(), ctx, scale_x=2.0, scale_y=5.0)
    np.testing.assert_allclose(out[0].paths[0].coords, [[100.0, 100.0], [200.0, 100.0]])

    square = [Layer("s", (Path(np.array([[110.0, 110.0], [90.0, 90.0]])),))]
    out = scale(square, ctx, scale_x=2.0, scale_y=0.5, uniform=False)
    np.testing.assert_allclose(out[0].paths[0].coords, [[120.0, 105.0], [80.0, 95.0]])


def test_jitter_deform_consumes_two_draws_per_point() -> None:
    ctx = make_context(CANVAS, 11)
    out = jitter(_layers(), ctx, amount_x=5.0, amount_y=3.0)
    ref = SeededRandom(11)
    draws = ref.random(4).reshape(2, 2)
    expected = np.array([[100.0, 100.0], [150.0, 100.0]]) + (draws - 0.5) * 2.0 * [5.0, 3.0]
    np.testing.assert_allclose(out[0].paths[0].coords, expected)
    assert ctx.rng.state == ref.state


def test_jitter_translate_keeps_shape() -> None:
    ctx = make_context(CANVAS, 3)
    out = jitter(_layers(), ctx, transform_mode="translate")
    before = _layers()[0].paths[0].coords
    after = out[0].paths[0].coords
    delta = after - before
    np.testing.assert_allclose(delta[0], delta[1])
    assert np.all(np.abs(delta) <= 5.0)


def test_twist_modifier_preserves_distance_from_center() -> None:
    spec = unit_registry.get("twist")
    pts = Path(np.array([[150.0, 100.0], [100.0, 180.0], [40.0, 60.0]]))
    out = spec.execute({"twist_amount": 90.0}, [Layer("t", (pts,))], make_context(CANVAS, 0))
    before = np.hypot(pts.coords[:, 0] - 100.0, pts.coords[:, 1] - 100.0)
    after = out[0].paths[0].coords
    np.testing.assert_allclose(np.hypot(after[:, 0] - 100.0, after[:, 1] - 100.0), before)
    assert not np.allclose(after, pts.coords)


def test_smooth_and_subdivide_modifiers() -> None:
    path = Path(np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]]))
    ctx = make_context(CANVAS, 0)
    smoothed = unit_registry.get("smooth").execute({"iterations": 1}, [Layer("p", (path,))], ctx)
    assert len(smoothed[0].paths[0]) == 4

    sub = unit_registry.get("subdivide").execute({"divisions": 3}, [Layer("p", (path,))], ctx)
    assert len(sub[0].paths[0]) == 7
    assert unit_registry.get("smooth").execute({"iterations": 0}, [Layer("p", (path,))], ctx)[0].paths[0] is path


@pytest.mark.parametrize("name", ["rotate", "scale", "twist", "smooth", "jitter", "wave_displace"])
def test_modifiers_pass_degenerate_paths_through(name: str) -> None:
    empty = Path(np.zeros((0, 2)))
    out = unit_registry.get(name).execute({}, [Layer("e", (empty,))], make_context(CANVAS, 0))
    assert len(out[0].paths) == 1
    assert len(out[0].paths[0]) == 0
