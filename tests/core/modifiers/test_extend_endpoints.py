"""core.modifiers.extend_endpoints をテスト。"""

from __future__ import annotations

import numpy as np

from plotweave.core.context import make_context
from plotweave.core.model import CanvasSettings, Layer, Path
from plotweave.core.modifiers.extend_endpoints import extend_endpoints, extension_direction
from plotweave.core.rng import SeededRandom

CANVAS = CanvasSettings(100.0, 100.0)


def _one(path: Path, seed: int = 1, **params: object) -> tuple[Path, ...]:
    ctx = make_context(CANVAS, seed)
    return extend_endpoints([Layer("e", (path,))], ctx, **params)[0].paths


def test_tangent_extension_without_randomness() -> None:
    (out,) = _one(Path.from_points([(0, 0), (10, 0)]), extend_amount=5.0, randomness=0.0)
    np.testing.assert_allclose(out.coords, [[-5.0, 0.0], [0.0, 0.0], [10.0, 0.0], [15.0, 0.0]])
    assert out.closed is False


def test_inward_direction_reverses_extension() -> None:
    (out,) = _one(
        Path.from_points([(0, 0), (10, 0)]), extend_amount=5.0, randomness=0.0, direction="inward"
    )
    np.testing.assert_allclose(out.coords, [[5.0, 0.0], [0.0, 0.0], [10.0, 0.0], [5.0, 0.0]])


def test_randomness_draws_end_then_start() -> None:
    (out,) = _one(Path.from_points([(0, 0), (10, 0)]), seed=9, extend_amount=10.0)
    r = SeededRandom(9)
    end = 10.0 * (1.0 + (r() - 0.5) * 2.0 * 0.5)
    start = 10.0 * (1.0 + (r() - 0.5) * 2.0 * 0.5)
    np.testing.assert_allclose(out.coords[0], [-start, 0.0])
    np.testing.assert_allclose(out.coords[-1], [10.0 + end, 0.0])


def test_both_direction_draws_sign_first() -> None:
    ctx = make_context(CANVAS, 4)
    layers = [Layer("e", (Path.from_points([(0, 0), (10, 0)]),))]
    out = extend_endpoints(layers, ctx, randomness=0.0, direction="both")[0].paths[0]
    r = SeededRandom(4)
    sign = 1.0 if r() < 0.5 else -1.0
    np.testing.assert_allclose(out.coords[-1], [10.0 + 10.0 * sign, 0.0])
    r.skip(2)
    assert ctx.rng.state == r.state


def test_closed_short_and_zero_length_paths_pass_through() -> None:
    ctx = make_context(CANVAS, 2)
    paths = (
        Path.from_points([(0, 0), (10, 0), (10, 10)], closed=True),
        Path.from_points([(3, 3)]),
        Path.from_points([(1, 1), (1, 1)]),
    )
    out = extend_endpoints([Layer("e", paths)], ctx)[0].paths
    for a, b in zip(paths, out):
        assert a is b
    assert ctx.rng.state == SeededRandom(2).state


def test_only_end_is_extended_when_start_disabled() -> None:
    (out,) = _one(
        Path.from_points([(0, 0), (0, 10)]),
        extend_amount=5.0,
        randomness=0.0,
        extend_start=False,
        direction_mode="vertical",
    )
    np.testing.assert_allclose(out.coords, [[0.0, 0.0], [0.0, 10.0], [0.0, 15.0]])


def test_radial_mode_points_away_from_center() -> None:
    (out,) = _one(
        Path.from_points([(60, 50), (70, 50)]),
        extend_amount=5.0,
        randomness=0.0,
        direction_mode="radial",
    )
    np.testing.assert_allclose(out.coords, [[65.0, 50.0], [60.0, 50.0], [70.0, 50.0], [75.0, 50.0]])


def test_debug_layer_keeps_path_and_appends_extensions() -> None:
    src = Path.from_points([(0, 0), (10, 0)])
    out = _one(src, extend_amount=5.0, randomness=0.0, debug_separate_layer=True)
    assert len(out) == 3
    assert out[0] is src
    assert out[1].points == [(10.0, 0.0), (15.0, 0.0)]
    assert out[2].points == [(-5.0, 0.0), (0.0, 0.0)]


def test_extension_direction_modes() -> None:
    assert extension_direction("horizontal", (0.0, 0.0), (5.0, 0.0), False, (0.0, 0.0)) == (-1.0, 0.0)
    assert extension_direction("horizontal", (5.0, 0.0), (0.0, 0.0), True, (0.0, 0.0)) == (1.0, 0.0)
    assert extension_direction("vertical", (0.0, 0.0), (0.0, 5.0), False, (0.0, 0.0)) == (0.0, -1.0)
    assert extension_direction("radial", (3.0, 4.0), (0.0, 0.0), True, (0.0, 0.0)) == (0.6, 0.8)
    assert extension_direction("spiral", (3.0, 4.0), (0.0, 0.0), True, (0.0, 0.0)) is None
