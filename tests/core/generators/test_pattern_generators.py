"""縦線・十字格子・ダッシュ列・Truchet・等高線・ボロノイの各 generator をテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from plotweave.core.context import make_context
from plotweave.core.generators.contours import contour_thresholds, contours
from plotweave.core.generators.cross_grid import cross_grid
from plotweave.core.generators.dash_columns import dash_columns
from plotweave.core.generators.truchet_tiles import tile_shapes, truchet_tiles
from plotweave.core.generators.vertical_lines import vertical_lines
from plotweave.core.generators.voronoi import voronoi
from plotweave.core.model import CanvasSettings, Layer
from plotweave.core.rng import SeededRandom

WIDE = CanvasSettings(200.0, 100.0)
SQUARE = CanvasSettings(100.0, 100.0)


def _ends(layer: Layer) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    return [(p.points[0], p.points[-1]) for p in layer.paths]


# --- vertical_lines ---


def test_vertical_lines_uniform_centered() -> None:
    (layer,) = vertical_lines(make_context(WIDE, 1), line_count=3, spacing=10.0, height_max=40.0)
    assert layer.id == "vertical_lines"
    assert _ends(layer) == [
        ((90.0, 30.0), (90.0, 70.0)),
        ((100.0, 30.0), (100.0, 70.0)),
        ((110.0, 30.0), (110.0, 70.0)),
    ]


def test_vertical_lines_gradient_with_bottom_and_top_alignment() -> None:
    ctx = make_context(WIDE, 1)
    common = {"line_count": 3, "height_mode": "gradient", "height_min": 0.0, "height_max": 10.0}
    (bottom,) = vertical_lines(ctx, alignment="bottom", **common)
    assert [q for _, q in _ends(bottom)] == [(90.0, 50.0), (100.0, 45.0), (110.0, 40.0)]
    (top,) = vertical_lines(ctx, alignment="top", gradient_direction="right-left", **common)
    assert [q for _, q in _ends(top)] == [(90.0, 60.0), (100.0, 55.0), (110.0, 50.0)]


def test_vertical_lines_position_when_not_centered() -> None:
    (layer,) = vertical_lines(make_context(WIDE, 1), line_count=3, centered=False, position_x=25.0)
    assert [p.points[0][0] for p in layer.paths] == [40.0, 50.0, 60.0]


def test_vertical_lines_random_draws_height_then_offset_per_line() -> None:
    ctx = make_context(WIDE, 3)
    (layer,) = vertical_lines(ctx, line_count=2, height_mode="random", alignment="random")
    r = SeededRandom(3)
    for path in layer.paths:
        h = 50.0 + r() * 50.0
        off = (r() - 0.5) * 2.0 * 20.0
        np.testing.assert_allclose(path.coords[:, 1], [50.0 - h / 2.0 + off, 50.0 + h / 2.0 + off])
    assert ctx.rng.state == r.state


def test_vertical_lines_height_falloff() -> None:
    ctx = make_context(WIDE, 1)
    (near,) = vertical_lines(ctx, line_count=1, enable_height_falloff=True)
    assert _ends(near) == [((100.0, 0.0), (100.0, 100.0))]
    (far,) = vertical_lines(ctx, line_count=1, enable_height_falloff=True, falloff_center_x=0.0)
    assert _ends(far) == [((100.0, 25.0), (100.0, 75.0))]
    (inv,) = vertical_lines(
        ctx, line_count=1, enable_height_falloff=True, falloff_center_x=0.0, invert_falloff=True
    )
    assert _ends(inv) == [((100.0, 0.0), (100.0, 100.0))]


# --- cross_grid ---


def test_cross_grid_plus_single_stroke_order() -> None:
    (layer,) = cross_grid(make_context(SQUARE, 1), columns=1, rows=1, cross_style="plus")
    assert layer.paths[0].points == [
        (46.0, 50.0),
        (54.0, 50.0),
        (50.0, 50.0),
        (50.0, 46.0),
        (50.0, 54.0),
    ]


def test_cross_grid_x_is_rotated_45_degrees() -> None:
    (layer,) = cross_grid(make_context(SQUARE, 1), columns=1, rows=1)
    d = 4.0 / math.sqrt(2.0)
    np.testing.assert_allclose(layer.paths[0].coords[0], [50.0 - d, 50.0 - d], atol=1e-12)
    np.testing.assert_allclose(layer.paths[0].coords[2], [50.0, 50.0], atol=1e-12)


def test_cross_grid_parallel_arms_are_serpentine() -> None:
    (layer,) = cross_grid(
        make_context(SQUARE, 1), columns=1, rows=1, cross_style="plus", line_count=2
    )
    local = layer.paths[0].coords - 50.0
    np.testing.assert_allclose(
        local,
        [
            [-4.0, -0.5],
            [4.0, -0.5],
            [4.0, 0.5],
            [-4.0, 0.5],
            [0.0, 0.0],
            [-0.5, -4.0],
            [-0.5, 4.0],
            [0.5, 4.0],
            [0.5, -4.0],
        ],
    )


def test_cross_grid_show_grid_adds_line_layer() -> None:
    out = cross_grid(make_context(SQUARE, 1), columns=2, rows=3, show_grid=True)
    assert [layer.id for layer in out] == ["cross_grid", "cross_grid_lines"]
    assert len(out[0].paths) == 6
    assert len(out[1].paths) == 4 + 3


# --- dash_columns ---

_FULL_COLUMN = {
    "columns": 1,
    "total_height": 100.0,
    "dash_spacing": 10.0,
    "min_block_height": 100.0,
    "max_block_height": 100.0,
    "min_gap_height": 0.0,
    "max_gap_height": 0.0,
}


def test_dash_columns_full_block_geometry() -> None:
    (layer,) = dash_columns(make_context(SQUARE, 1), **_FULL_COLUMN)
    assert len(layer.paths) == 10
    assert _ends(layer)[0] == ((46.0, 5.0), (54.0, 5.0))
    assert [p.points[0][1] for p in layer.paths] == [5.0 + 10.0 * i for i in range(10)]


def test_dash_columns_thickness_adds_parallel_lines() -> None:
    (layer,) = dash_columns(make_context(SQUARE, 1), dash_thickness=2, **_FULL_COLUMN)
    ys = [p.points[0][1] for p in layer.paths]
    assert len(ys) == 14
    np.testing.assert_allclose(ys[:4], [5.0, 9.0, 19.0, 23.0])


def test_dash_columns_ignore_pipeline_seed() -> None:
    ctx1 = make_context(SQUARE, 1)
    a = dash_columns(ctx1)[0]
    b = dash_columns(make_context(SQUARE, 2))[0]
    assert len(a.paths) == len(b.paths) > 0
    for p, q in zip(a.paths, b.paths):
        np.testing.assert_array_equal(p.coords, q.coords)
    assert ctx1.rng.state == SeededRandom(1).state
    c = dash_columns(make_context(SQUARE, 1), seed=99)[0]
    assert [p.points for p in c.paths] != [p.points for p in a.paths]


def test_dash_columns_output_modes_split_the_same_dashes() -> None:
    ctx = make_context(SQUARE, 1)
    total = len(dash_columns(ctx)[0].paths)
    per_col = dash_columns(ctx, output_mode="column-per-layer")
    assert all(layer.id.startswith("dash_col_") for layer in per_col)
    assert sum(len(layer.paths) for layer in per_col) == total
    per_block = dash_columns(ctx, output_mode="block-per-layer")
    assert [layer.id for layer in per_block] == [f"dash_block_{i}" for i in range(len(per_block))]
    assert sum(len(layer.paths) for layer in per_block) == total


def test_dash_columns_invalid_heights_raise() -> None:
    ctx = make_context(SQUARE, 1)
    with pytest.raises(ValueError):
        dash_columns(ctx, dash_spacing=0.0)
    with pytest.raises(ValueError):
        dash_columns(ctx, max_block_height=0.0, max_gap_height=0.0)


# --- truchet_tiles ---


def test_tile_shapes_sharp_corners_match_arc_endpoints() -> None:
    arcs = tile_shapes("arcs", 10.0, 0.0, 8)
    sharp = tile_shapes("arcs", 10.0, 0.0, 8, corner_style="sharp")
    assert len(arcs) == len(sharp) == 2
    for a, s in zip(arcs, sharp):
        np.testing.assert_allclose(a[[0, -1]], s, atol=1e-12)


def test_tile_shapes_degenerate_radii_are_skipped() -> None:
    assert len(tile_shapes("arcs", 10.0, 10.0, 8)) == 1
    assert tile_shapes("uturn", 10.0, -5.0, 8) == []
    assert len(tile_shapes("unknown", 10.0, 0.0, 8)) == 2


def test_truchet_lines_connect_edges_uses_checker_rotation() -> None:
    (layer,) = truchet_tiles(
        make_context(SQUARE, 1),
        columns=2,
        rows=1,
        tile_type="lines",
        line_count=1,
        random_rotation=False,
        connect_edges=True,
    )
    assert layer.id == "truchet_tiles"
    np.testing.assert_allclose(layer.paths[0].coords, [[50.0, 40.0], [30.0, 60.0]], atol=1e-12)
    np.testing.assert_allclose(layer.paths[1].coords, [[50.0, 60.0], [70.0, 40.0]], atol=1e-12)


@pytest.mark.parametrize(
    "tile_type, per_tile",
    [("arcs", 2), ("lines", 2), ("mixed", 4), ("curves", 4)],
)
def test_truchet_rng_consumption(tile_type: str, per_tile: int) -> None:
    ctx = make_context(SQUARE, 11)
    truchet_tiles(ctx, columns=3, rows=2, tile_type=tile_type, pattern_variety=50.0, segments=4)
    expected = SeededRandom(11)
    expected.skip(1 + (1 if tile_type in ("mixed", "curves") else 0) + 6 * per_tile)
    assert ctx.rng.state == expected.state


# --- contours ---


def test_contour_thresholds() -> None:
    np.testing.assert_allclose(contour_thresholds(5), [0.1, 0.3, 0.5, 0.7, 0.9])
    np.testing.assert_allclose(contour_thresholds(1), [0.5])
    assert contour_thresholds(0).shape == (0,)


def test_contours_stay_in_field_and_do_not_use_shared_rng() -> None:
    ctx = make_context(SQUARE, 4)
    (layer,) = contours(ctx, resolution=20)
    assert layer.id == "contours"
    assert len(layer.paths) > 0
    for p in layer.paths:
        assert p.closed is False
        assert len(p) >= 3
        assert np.all(p.coords >= 10.0 - 1e-9)
        assert np.all(p.coords <= 90.0 + 1e-9)
    assert ctx.rng.state == SeededRandom(4).state

    (other,) = contours(make_context(SQUARE, 4), resolution=20, seed_offset=1)
    assert [p.points for p in other.paths] != [p.points for p in layer.paths]


def test_contours_with_no_field_area() -> None:
    (layer,) = contours(make_context(SQUARE, 4), margin=60.0)
    assert layer.paths == ()


# --- voronoi ---


def test_voronoi_edges_inside_margin_and_rng_consumption() -> None:
    ctx = make_context(SQUARE, 8)
    (layer,) = voronoi(ctx, point_count=10, margin=10.0)
    assert layer.id == "voronoi"
    assert len(layer.paths) > 0
    for p in layer.paths:
        assert len(p) == 2
        assert np.all(p.coords >= 10.0 - 1e-9)
        assert np.all(p.coords <= 90.0 + 1e-9)
    expected = SeededRandom(8)
    expected.skip(20)
    assert ctx.rng.state == expected.state
