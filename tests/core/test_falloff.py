"""core.falloff / core.easing をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from plotweave.core.easing import apply_curve, ease
from plotweave.core.falloff import (
    DISABLED_FALLOFF,
    FalloffParams,
    blend_coords,
    calculate_falloff,
    falloff_params,
    falloff_strengths,
    lerp_with_falloff,
)
from plotweave.core.model import CanvasSettings

CANVAS = CanvasSettings(200.0, 200.0)


def test_disabled_falloff_is_always_one() -> None:
    pts = np.array([[0.0, 0.0], [100.0, 100.0], [1e6, -1e6]])
    np.testing.assert_array_equal(falloff_strengths(pts, DISABLED_FALLOFF, CANVAS), [1.0, 1.0, 1.0])
    assert calculate_falloff((12.0, 34.0), DISABLED_FALLOFF, CANVAS) == 1.0


def test_lerp_endpoints_are_exact() -> None:
    a, b = 0.1, 0.7
    assert lerp_with_falloff(a, b, 0.0) == a
    assert lerp_with_falloff(a, b, 1.0) == b
    assert lerp_with_falloff(0.0, 10.0, 0.25) == pytest.approx(2.5)


def test_blend_coords_endpoints_are_exact() -> None:
    a = np.array([[0.1, 0.2], [0.3, 0.4], [1.0, 1.0]])
    b = np.array([[0.7, 0.9], [0.11, 0.13], [3.0, 5.0]])
    out = blend_coords(a, b, np.array([0.0, 1.0, 0.5]))
    np.testing.assert_array_equal(out[0], a[0])
    np.testing.assert_array_equal(out[1], b[1])
    np.testing.assert_allclose(out[2], [2.0, 3.0])


def test_radial_linear_strength() -> None:
    fo = FalloffParams(enabled=True, center_x=50.0, center_y=50.0, radius=100.0)
    pts = np.array([[100.0, 100.0], [150.0, 100.0], [100.0, 250.0]])
    np.testing.assert_allclose(falloff_strengths(pts, fo, CANVAS), [1.0, 0.5, 0.0])


def test_invert_and_shapes() -> None:
    fo = FalloffParams(enabled=True, radius=100.0, invert=True)
    assert calculate_falloff((100.0, 100.0), fo, CANVAS) == pytest.approx(0.0)

    horizontal = FalloffParams(enabled=True, radius=100.0, shape="horizontal")
    assert calculate_falloff((100.0, 0.0), horizontal, CANVAS) == pytest.approx(1.0)
    vertical = FalloffParams(enabled=True, radius=100.0, shape="vertical")
    assert calculate_falloff((100.0, 150.0), vertical, CANVAS) == pytest.approx(0.5)


def test_zero_radius_is_a_step() -> None:
    fo = FalloffParams(enabled=True, radius=0.0)
    assert calculate_falloff((100.0, 100.0), fo, CANVAS) == 1.0
    assert calculate_falloff((100.0, 100.5), fo, CANVAS) == 0.0


def test_falloff_params_from_mapping() -> None:
    fo = falloff_params(
        {
            "enable_falloff": True,
            "falloff_x": 25,
            "falloff_radius": 40,
            "falloff_curve": "ease-in",
            "falloff_shape": "bogus",
        }
    )
    assert fo.enabled is True
    assert fo.center_x == 25.0
    assert fo.center_y == 50.0
    assert fo.radius == 40.0
    assert fo.curve == "ease-in"
    assert fo.shape == "radial"
    assert falloff_params({"enable_falloff": 1}).enabled is False


def test_curves() -> None:
    t = np.array([0.0, 0.25, 0.5, 1.0])
    np.testing.assert_allclose(apply_curve("linear", t), t)
    np.testing.assert_allclose(apply_curve("ease-in", t), t * t)
    np.testing.assert_allclose(apply_curve("ease-out", t), [0.0, 0.4375, 0.75, 1.0])
    np.testing.assert_allclose(apply_curve("ease-in-out", t), [0.0, 0.125, 0.5, 1.0])
    np.testing.assert_allclose(apply_curve("inverse", t), 1.0 - t)
    assert ease("unknown", 0.3) == pytest.approx(0.3)
    assert ease("linear", 2.0) == 1.0
    assert ease("linear", -1.0) == 0.0
