"""core.modifiers.randomize をテスト。

固定シードでの出力値を直接比べ、乱数の消費順が変わっていないことを確かめる。
"""

from __future__ import annotations

import numpy as np

from plotweave.core.context import make_context
from plotweave.core.geometry import circle_path, line_path, rect_path
from plotweave.core.model import CanvasSettings, Layer, Path
from plotweave.core.modifiers.randomize import randomize, trim_points
from plotweave.core.rng import SeededRandom

CANVAS = CanvasSettings(200.0, 200.0)


def _curve() -> Path:
    return Path(np.array([[float(i), i * i * 0.1] for i in range(10)]))


def test_no_variation_keeps_geometry_and_shared_rng() -> None:
    ctx = make_context(CANVAS, 5)
    layers = [Layer("r", (line_path(0.0, 0.0, 10.0, 0.0), circle_path(50.0, 50.0, 5.0, 8)))]
    out = randomize(layers, ctx)
    for a, b in zip(layers[0].paths, out[0].paths):
        np.testing.assert_array_equal(a.coords, b.coords)
        assert a.closed == b.closed
    assert ctx.rng.state == SeededRandom(5).state


def test_position_variation_reference_values() -> None:
    ctx = make_context(CANVAS, 0)
    layers = [Layer("r", (line_path(0.0, 0.0, 10.0, 0.0), line_path(0.0, 5.0, 10.0, 5.0)))]
    out = randomize(layers, ctx, position_variation=4.0, seed=77)

    np.testing.assert_allclose(
        out[0].paths[0].coords,
        [[-0.5951891541481018, -3.6622419375926256], [9.404810845851898, -3.6622419375926256]],
        rtol=1e-12,
        atol=1e-12,
    )
    np.testing.assert_allclose(
        out[0].paths[1].coords,
        [[2.6088654845952988, 8.065187979489565], [12.608865484595299, 8.065187979489565]],
        rtol=1e-12,
        atol=1e-12,
    )


def test_active_variations_draw_first_reference_values() -> None:
    ctx = make_context(CANVAS, 0)
    layers = [Layer("r", (_curve(), line_path(0.0, 0.0, 10.0, 0.0), _curve()))]
    out = randomize(
        layers,
        ctx,
        scale_variation=50.0,
        rotation_variation=30.0,
        length_variation=50.0,
        length_mode="trimBoth",
        seed=5,
    )
    first, line, last = out[0].paths

    assert len(first) == 9
    np.testing.assert_allclose(first.coords[0], [0.651784244982332, -1.5321889088072296], atol=1e-9)
    np.testing.assert_allclose(first.coords[-1], [7.081745971982593, 7.659078020219475], atol=1e-9)

    # 2 点のパスは長さ分の乱数を消費しない
    np.testing.assert_allclose(
        line.coords,
        [[-0.09209120576422691, -1.194914435623347], [10.092091205764227, 1.194914435623347]],
        atol=1e-9,
    )

    assert len(last) == 7
    np.testing.assert_allclose(last.coords[0], [2.2895286147736744, -0.30091090287923716], atol=1e-9)
    np.testing.assert_allclose(last.coords[-1], [6.057495711499305, 5.1716086829397065], atol=1e-9)


def test_length_variation_trims_and_opens_path() -> None:
    ctx = make_context(CANVAS, 0)
    square = rect_path(0.0, 0.0, 10.0, 10.0)
    out = randomize([Layer("r", (square, square, square))], ctx, length_variation=80.0, seed=12345)

    a, b, c = out[0].paths
    np.testing.assert_array_equal(a.coords, [[0.0, 0.0], [10.0, 0.0]])
    np.testing.assert_array_equal(b.coords, square.coords[:4])
    np.testing.assert_array_equal(c.coords, square.coords[:4])
    assert not (a.closed or b.closed or c.closed)


def test_rotation_variation_keeps_centroid() -> None:
    ctx = make_context(CANVAS, 0)
    src = line_path(0.0, 0.0, 10.0, 0.0)
    out = randomize([Layer("r", (src,))], ctx, rotation_variation=90.0, seed=3)
    dst = out[0].paths[0].coords
    np.testing.assert_allclose(dst.mean(axis=0), [5.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(np.hypot(*(dst[1] - dst[0])), 10.0)


def test_short_paths_are_untouched() -> None:
    ctx = make_context(CANVAS, 0)
    single = Path(np.array([[1.0, 1.0]]))
    out = randomize([Layer("r", (single,))], ctx, position_variation=10.0)
    assert out[0].paths[0] is single


def test_trim_points_modes() -> None:
    v = np.arange(20, dtype=np.float64).reshape(10, 2)
    np.testing.assert_array_equal(trim_points(v, 3, "trimEnd"), v[:7])
    np.testing.assert_array_equal(trim_points(v, 3, "trimStart"), v[3:])
    np.testing.assert_array_equal(trim_points(v, 3, "trimBoth"), v[1:8])
    assert trim_points(v, 9, "trimEnd") is v
    assert trim_points(v, 0, "trimEnd") is v
