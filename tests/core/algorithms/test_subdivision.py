"""core.algorithms.subdivision をテスト。"""

from __future__ import annotations

import numpy as np

from plotweave.core.algorithms.subdivision import edge_divisions, subdivide_coords


def test_uniform_open_point_count() -> None:
    v = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]])
    for d in (1, 2, 5):
        out = subdivide_coords(v, closed=False, divisions=d)
        assert out.shape == ((3 - 1) * d + 1, 2)
        np.testing.assert_array_equal(out[0], v[0])
        np.testing.assert_array_equal(out[-1], v[-1])


def test_uniform_inserts_evenly_spaced_points() -> None:
    v = np.array([[0.0, 0.0], [10.0, 0.0]])
    out = subdivide_coords(v, closed=False, divisions=4)
    np.testing.assert_allclose(out[:, 0], [0.0, 2.5, 5.0, 7.5, 10.0])
    np.testing.assert_allclose(out[:, 1], 0.0)


def test_closed_path_subdivides_closing_edge() -> None:
    square = np.array([[0.0, 0.0], [4.0, 0.0], [4.0, 4.0], [0.0, 4.0]])
    out = subdivide_coords(square, closed=True, divisions=2)
    assert out.shape == (8, 2)
    np.testing.assert_allclose(out[-1], [0.0, 2.0])


def test_closed_path_with_revisited_start_adds_nothing_for_closing_edge() -> None:
    ring = np.array([[0.0, 0.0], [4.0, 0.0], [4.0, 4.0], [0.0, 0.0]])
    out = subdivide_coords(ring, closed=True, divisions=2)
    assert out.shape == (7, 2)


def test_adaptive_divisions() -> None:
    lengths = np.array([0.5, 3.5, 10.0, 1000.0])
    d = edge_divisions(lengths, "adaptive", 5, 3.0, 20)
    np.testing.assert_array_equal(d, [1, 1, 3, 20])

    v = np.array([[0.0, 0.0], [10.0, 0.0]])
    out = subdivide_coords(v, closed=False, mode="adaptive", min_segment_length=3.0)
    assert out.shape == (4, 2)


def test_short_inputs_are_returned() -> None:
    single = np.array([[1.0, 2.0]])
    np.testing.assert_array_equal(subdivide_coords(single, closed=True), single)
