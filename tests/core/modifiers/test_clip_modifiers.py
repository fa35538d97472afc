"""core.modifiers.clip_rect / clip_circle をテスト。"""

from __future__ import annotations

import numpy as np

from plotweave.core.context import make_context
from plotweave.core.geometry import circle_path, line_path
from plotweave.core.model import CanvasSettings, Layer
from plotweave.core.modifiers.clip_circle import clip_circle
from plotweave.core.modifiers.clip_rect import clip_rect

CANVAS = CanvasSettings(200.0, 200.0)


def test_clip_rect_drops_line_outside_rectangle() -> None:
    ctx = make_context(CANVAS, 0)
    layers = [Layer("lines", (line_path(0.0, 195.0, 200.0, 195.0),))]
    out = clip_rect(layers, ctx)
    assert [layer.id for layer in out] == ["lines"]
    assert out[0].paths == ()


def test_clip_rect_trims_to_percent_rectangle() -> None:
    ctx = make_context(CANVAS, 0)
    layers = [Layer("lines", (line_path(0.0, 100.0, 200.0, 100.0),))]
    out = clip_rect(layers, ctx, x=25.0, y=25.0, width=50.0, height=50.0)
    assert len(out[0].paths) == 0

    dense = [Layer("lines", (line_path(60.0, 100.0, 200.0, 100.0),))]
    out = clip_rect(dense, ctx, x=25.0, y=25.0, width=50.0, height=50.0)
    np.testing.assert_allclose(out[0].paths[0].coords, [[60.0, 100.0], [150.0, 100.0]])


def test_clip_circle_outputs_open_paths() -> None:
    ctx = make_context(CANVAS, 0)
    ring = circle_path(100.0, 100.0, 50.0, 64)
    out = clip_circle([Layer("c", (ring,))], ctx, center_x=75.0, center_y=50.0, radius=40.0)
    assert len(out[0].paths) >= 1
    for p in out[0].paths:
        assert p.closed is False
        assert np.all(np.hypot(p.coords[:, 0] - 150.0, p.coords[:, 1] - 100.0) <= 40.0 + 1e-6)


def test_clip_circle_invert_keeps_outside() -> None:
    ctx = make_context(CANVAS, 0)
    ring = circle_path(100.0, 100.0, 10.0, 32)
    assert clip_circle([Layer("c", (ring,))], ctx, radius=5.0)[0].paths == ()
    kept = clip_circle([Layer("c", (ring,))], ctx, radius=5.0, invert=True)[0].paths
    assert len(kept) == 1
    assert len(kept[0]) == 33
