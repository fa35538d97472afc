"""core.algorithms.packing をテスト。"""

from __future__ import annotations

import itertools
import math

from plotweave.core.algorithms.packing import pack_circles
from plotweave.core.rng import SeededRandom


def test_attempts_never_exceed_budget() -> None:
    res = pack_circles(
        SeededRandom(1),
        (0.0, 0.0, 50.0, 50.0),
        min_radius=5.0,
        max_radius=10.0,
        count=1000,
        padding=1.0,
        max_attempts=40,
    )
    assert res.attempts <= 40
    assert len(res.circles) <= 40


def test_circles_do_not_overlap_and_stay_inside() -> None:
    res = pack_circles(
        SeededRandom(42),
        (10.0, 20.0, 100.0, 80.0),
        min_radius=2.0,
        max_radius=8.0,
        count=30,
        padding=1.5,
        max_attempts=2000,
    )
    assert len(res.circles) > 0
    for c in res.circles:
        assert 10.0 + c.r - 1e-9 <= c.x <= 110.0 - c.r + 1e-9
        assert 20.0 + c.r - 1e-9 <= c.y <= 100.0 - c.r + 1e-9
    for a, b in itertools.combinations(res.circles, 2):
        assert math.hypot(a.x - b.x, a.y - b.y) >= a.r + b.r + 1.5 - 1e-9


def test_stops_when_count_reached() -> None:
    res = pack_circles(
        SeededRandom(3),
        (0.0, 0.0, 1000.0, 1000.0),
        min_radius=1.0,
        max_radius=1.0,
        count=1,
        padding=0.0,
        max_attempts=100,
    )
    assert len(res.circles) == 1
    assert res.attempts == 1


def test_same_seed_same_result() -> None:
    kwargs = dict(min_radius=3.0, max_radius=9.0, count=20, padding=1.0, max_attempts=500)
    a = pack_circles(SeededRandom(7), (0.0, 0.0, 120.0, 120.0), **kwargs)
    b = pack_circles(SeededRandom(7), (0.0, 0.0, 120.0, 120.0), **kwargs)
    assert a == b
