"""1 点から扇状に粒子を噴射したような点・線群を生成する generator。"""

from __future__ import annotations

import math

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import circle_path, line_path
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

PARTICLE_TYPES: tuple[str, ...] = ("dot", "line", "streak")

_DOT_SEGMENTS = 12


@generator
def particle_spray(
    ctx: ExecutionContext,
    *,
    source_x: float = 50.0,
    source_y: float = 50.0,
    particle_count: int = 200,
    direction: float = 0.0,
    spread: float = 30.0,
    min_distance: float = 10.0,
    max_distance: float = 100.0,
    particle_type: str = "dot",
    dot_size: float = 1.0,
    streak_length: float = 5.0,
    density_falloff: bool = True,
) -> list[Layer]:
    """粒子を particle_count 個生成する（粒子ごとに乱数 2 回）。

    Parameters
    ----------
    direction : float
        噴射方向 [deg]。
    spread : float
        方向の振れ幅 [deg]（±）。
    density_falloff : bool, default True
        True なら距離を `t^2` 分布にして発生源付近を密にする。
    particle_type : {"dot", "line", "streak"}
        dot は小円、line は方向に直交する短線、streak は方向に沿った線。
    """
    canvas = ctx.canvas
    rng = ctx.rng
    sx = canvas.pct_x(source_x)
    sy = canvas.pct_y(source_y)
    dir_rad = math.radians(float(direction))
    spread_rad = math.radians(float(spread))
    d_lo = float(min_distance)
    d_hi = float(max_distance)

    paths: list[Path] = []
    for _ in range(max(0, int(particle_count))):
        angle = dir_rad + (rng() - 0.5) * spread_rad * 2.0
        t = rng()
        dist = d_lo + (d_hi - d_lo) * (t * t if density_falloff else t)
        px = sx + math.cos(angle) * dist
        py = sy + math.sin(angle) * dist

        if particle_type == "dot":
            paths.append(circle_path(px, py, float(dot_size) / 2.0, _DOT_SEGMENTS))
        elif particle_type == "line":
            perp = angle + math.pi / 2.0
            half = float(dot_size)
            ex = math.cos(perp) * half
            ey = math.sin(perp) * half
            paths.append(line_path(px - ex, py - ey, px + ex, py + ey))
        elif particle_type == "streak":
            ratio = dist / d_hi if d_hi else 0.0
            length = float(streak_length) * (0.5 + 0.5 * ratio)
            ex = math.cos(angle) * length / 2.0
            ey = math.sin(angle) * length / 2.0
            paths.append(line_path(px - ex, py - ey, px + ex, py + ey))

    return [Layer("particle_spray", tuple(paths))]
