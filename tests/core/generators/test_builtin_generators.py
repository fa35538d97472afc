"""組み込み generator 全般の共通性質をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from plotweave.core.builtins import ensure_builtin_units_registered
from plotweave.core.context import make_context
from plotweave.core.model import CanvasSettings, Layer
from plotweave.core.unit_registry import unit_registry

ensure_builtin_units_registered()

CANVAS = CanvasSettings(210.0, 297.0)

# 実行時間を抑えるための縮小パラメータ。
_SMALL: dict[str, dict[str, object]] = {
    "circle_pack": {"count": 15, "max_attempts": 300},
    "flow_field": {"lines": 20, "steps": 15},
    "scatter_points": {"count": 40},
    "particle_spray": {"particle_count": 30},
    "voronoi": {"point_count": 12},
    "contours": {"resolution": 30, "contour_levels": 4},
}

_EXPECTED_IDS = {
    "arc": "arc",
    "circle_pack": "circle_pack",
    "concentric_circles": "concentric",
    "contours": "contours",
    "cross_grid": "cross_grid",
    "dash_columns": "dash_columns",
    "flow_field": "flow_field",
    "grid": "grid",
    "horizontal_lines": "horizontal_lines",
    "lissajous": "lissajous",
    "particle_spray": "particle_spray",
    "radial_lines": "radial",
    "scatter_points": "scatter_points",
    "spiral": "spiral",
    "truchet_tiles": "truchet_tiles",
    "vertical_lines": "vertical_lines",
    "voronoi": "voronoi",
}


def _run(name: str, seed: int = 12345, **params: object) -> list[Layer]:
    spec = unit_registry.get(name)
    merged = dict(_SMALL.get(name, {}))
    merged.update(params)
    return spec.execute(merged, [], make_context(CANVAS, seed))


@pytest.mark.parametrize("name", sorted(_EXPECTED_IDS))
def test_generator_layer_id_and_finite_coords(name: str) -> None:
    out = _run(name)
    assert [layer.id for layer in out] == [_EXPECTED_IDS[name]]
    for path in out[0].paths:
        assert path.coords.dtype == np.float64
        assert np.all(np.isfinite(path.coords))


@pytest.mark.parametrize("name", sorted(_EXPECTED_IDS))
def test_generator_is_deterministic(name: str) -> None:
    a = _run(name, seed=7)
    b = _run(name, seed=7)
    assert len(a[0].paths) == len(b[0].paths)
    for p, q in zip(a[0].paths, b[0].paths):
        assert p.closed == q.closed
        np.testing.assert_array_equal(p.coords, q.coords)


def test_random_generators_depend_on_seed() -> None:
    for name in ("circle_pack", "scatter_points", "particle_spray", "voronoi"):
        a = _run(name, seed=1)[0].paths
        b = _run(name, seed=2)[0].paths
        assert not np.array_equal(a[0].coords, b[0].coords)


def test_all_builtins_are_registered() -> None:
    assert set(_EXPECTED_IDS) <= set(unit_registry.generators())


def test_arc_segments_and_close_path() -> None:
    out = _run("arc", radius=10.0, start_angle=0.0, end_angle=90.0, segments=64)
    p = out[0].paths[0]
    assert len(p) == 17
    assert p.closed is False

    closed = _run("arc", close_path=True, arc_count=2, radius_step=5.0)[0].paths
    assert len(closed) == 2
    for q in closed:
        assert q.closed is True
        np.testing.assert_array_equal(q.coords[0], q.coords[-1])
        np.testing.assert_allclose(q.coords[0], [105.0, 148.5])


def test_grid_lines_count() -> None:
    out = _run("grid", rows=3, cols=4)
    assert len(out[0].paths) == (3 + 1) + (4 + 1)
    crosses = _run("grid", rows=3, cols=4, style="crosses")
    assert len(crosses[0].paths) == 2 * 4 * 5


def test_spiral_point_count() -> None:
    out = _run("spiral", turns=2.5, points_per_turn=10)
    assert len(out[0].paths[0]) == 26
    np.testing.assert_allclose(out[0].paths[0].coords[0], CANVAS.center)


def test_circle_pack_respects_count() -> None:
    out = _run("circle_pack", count=5, max_attempts=5000, min_radius=2.0, max_radius=4.0)
    assert len(out[0].paths) <= 5
