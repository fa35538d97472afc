"""
どこで: `src/plotweave/core/generators/scatter_points.py`。
何を: 領域（矩形 / 円 / 楕円）内に点を棄却サンプリングで散布する。密度勾配とスタンプ配置に対応。
なぜ: 点描やパターン配置の素材を、試行回数の上限つきで決定論的に作るため。
"""

from __future__ import annotations

import math

from plotweave.core.algorithms.stamp import (
    StampSettings,
    has_stamp,
    place_stamp,
    stamp_center,
    stamp_rotation,
)
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import circle_path
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

SCATTER_REGIONS: tuple[str, ...] = ("rectangle", "circle", "ellipse")
DENSITY_FALLOFFS: tuple[str, ...] = ("none", "center-out", "edges-in", "top-down", "radial-noise")

_DOT_SEGMENTS = 12


def _in_region(region: str, lx: float, ly: float, width: float, height: float) -> bool:
    if region == "circle":
        r = min(width, height) / 2.0
        return lx * lx + ly * ly <= r * r
    if region == "ellipse":
        rx = width / 2.0
        ry = height / 2.0
        if rx == 0.0 or ry == 0.0:
            return False
        return (lx * lx) / (rx * rx) + (ly * ly) / (ry * ry) <= 1.0
    return True


def _keep_probability(
    mode: str,
    lx: float,
    ly: float,
    width: float,
    height: float,
    strength: float,
) -> float:
    if mode == "none":
        return 1.0
    nx = lx / (width / 2.0) if width else 0.0
    ny = ly / (height / 2.0) if height else 0.0
    dist = math.sqrt(nx * nx + ny * ny)
    if mode == "center-out":
        return 1.0 - dist * strength
    if mode == "edges-in":
        return dist * strength + (1.0 - strength)
    if mode == "top-down":
        return 1.0 - ((ny + 1.0) / 2.0) * strength
    if mode == "radial-noise":
        v = math.sin(math.atan2(ly, lx) * 7.0) * 0.5 + 0.5
        return v * strength + (1.0 - strength)
    return 1.0


@generator(stamp=True)
def scatter_points(
    ctx: ExecutionContext,
    *,
    count: int = 500,
    region: str = "rectangle",
    width: float = 150.0,
    height: float = 150.0,
    center_x: float = 50.0,
    center_y: float = 50.0,
    dot_size: float = 1.0,
    density_falloff: str = "none",
    falloff_strength: float = 50.0,
    stamp: StampSettings = StampSettings(),
) -> list[Layer]:
    """点（小円）またはスタンプを散布する。

    Parameters
    ----------
    count : int, default 500
        目標点数。試行上限は `count * 10`。
    region : {"rectangle", "circle", "ellipse"}
        散布領域。circle は `min(width, height)` を直径とする。
    density_falloff : str, default "none"
        密度勾配。候補点ごとに乱数 1 回で棄却判定する。
    falloff_strength : float, default 50.0
        密度勾配の強さ [%]。

    Notes
    -----
    1 試行あたり x, y, 棄却判定の 3 回、加えて採択時にスタンプ回転ぶん乱数を消費する。
    """
    canvas = ctx.canvas
    rng = ctx.rng
    w = float(width)
    h = float(height)
    cx = canvas.pct_x(center_x)
    cy = canvas.pct_y(center_y)
    strength = float(falloff_strength) / 100.0
    radius = float(dot_size) / 2.0
    target = max(0, int(count))
    budget = target * 10

    stamp_layers = ctx.input_layers("stamp")
    use_stamp = has_stamp(stamp_layers)
    anchor = stamp_center(stamp_layers) if use_stamp else (0.0, 0.0)

    paths: list[Path] = []
    generated = 0
    attempts = 0
    while generated < target and attempts < budget:
        attempts += 1
        lx = (rng() - 0.5) * w
        ly = (rng() - 0.5) * h
        if not _in_region(region, lx, ly, w, h):
            continue
        if rng() > _keep_probability(density_falloff, lx, ly, w, h, strength):
            continue

        px = cx + lx
        py = cy + ly
        if use_stamp:
            rot = stamp_rotation(stamp.rotation, rng, stamp.random_rotation)
            paths.extend(place_stamp(stamp_layers, anchor, px, py, stamp.scale, rot))
        else:
            paths.append(circle_path(px, py, radius, _DOT_SEGMENTS))
        generated += 1

    return [Layer("scatter_points", tuple(paths))]
