"""core.stats.plot_stats をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from plotweave.core.geometry import line_path, rect_path
from plotweave.core.model import Layer, Path
from plotweave.core.stats import plot_stats


def test_open_paths_draw_and_travel() -> None:
    layer = Layer("a", (line_path(0.0, 10.0, 30.0, 10.0), line_path(30.0, 20.0, 0.0, 20.0)))
    s = plot_stats([layer], speed_mm_s=10.0)
    assert s.path_count == 2
    assert s.point_count == 4
    assert s.draw_distance == pytest.approx(60.0)
    # 原点 -> (0, 10) と (30, 10) -> (30, 20)
    assert s.travel_distance == pytest.approx(20.0)
    assert s.estimated_seconds == pytest.approx(8.0)


def test_closed_path_has_no_closing_edge_and_pen_stays_at_last_point() -> None:
    tri = Path(np.array([[0.0, 0.0], [3.0, 0.0], [3.0, 4.0]]), closed=True)
    after = line_path(0.0, 0.0, 1.0, 0.0)
    s = plot_stats([Layer("t", (tri, after))])
    assert s.draw_distance == pytest.approx(3.0 + 4.0 + 1.0)
    # 閉パスの後もペンは最終頂点 (3, 4) にあり、そこから (0, 0) へ移動する。
    assert s.travel_distance == pytest.approx(5.0)


def test_degenerate_paths_are_counted() -> None:
    layer = Layer("p", (Path(np.array([[3.0, 4.0]])), Path(np.zeros((0, 2)))))
    s = plot_stats([layer])
    assert s.path_count == 2
    assert s.point_count == 1
    assert s.draw_distance == 0.0
    # 1 点のパスへは移動する。空のパスは飛ばす。
    assert s.travel_distance == pytest.approx(5.0)


def test_layers_are_walked_in_order() -> None:
    a = Layer("a", (rect_path(10.0, 10.0, 10.0, 10.0),))
    b = Layer("b", (line_path(10.0, 10.0, 10.0, 0.0),))
    s = plot_stats([a, b])
    assert s.path_count == 2
    assert s.draw_distance >= 40.0 + 10.0 - 1e-9


def test_speed_must_be_positive() -> None:
    with pytest.raises(ValueError):
        plot_stats([], speed_mm_s=0.0)
