"""水平線の束を生成する generator。"""

from __future__ import annotations

import math

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import Layer
from plotweave.core.unit_registry import generator

LINE_MODES: tuple[str, ...] = ("uniform", "random-offset", "wave", "converge")


@generator
def horizontal_lines(
    ctx: ExecutionContext,
    *,
    line_count: int = 20,
    spacing: float = 5.0,
    width: float = 150.0,
    start_y: float = 10.0,
    center_x: float = 50.0,
    line_mode: str = "uniform",
    random_offset: float = 10.0,
    wave_amplitude: float = 20.0,
    wave_frequency: float = 2.0,
    converge_strength: float = 50.0,
) -> list[Layer]:
    """start_y [%] から spacing 間隔で水平線を並べる。

    line_mode
        - "uniform": 全て同じ幅・位置
        - "random-offset": 線ごとに ±random_offset の横ずれ（乱数 1 回/本）
        - "wave": 行番号に対する sin で横ずれ
        - "converge": 縦方向の中央ほど短くする（converge_strength [%]）
    """
    canvas = ctx.canvas
    n = max(0, int(line_count))
    base_x = canvas.pct_x(center_x)
    base_y = canvas.pct_y(start_y)
    w = float(width)
    strength = float(converge_strength) / 100.0

    paths = []
    for i in range(n):
        y = base_y + i * float(spacing)
        x1 = base_x - w / 2.0
        x2 = base_x + w / 2.0
        if line_mode == "random-offset":
            off = (ctx.rng() - 0.5) * 2.0 * float(random_offset)
            x1 += off
            x2 += off
        elif line_mode == "wave":
            phase = (i / n) * 2.0 * math.pi * float(wave_frequency)
            off = math.sin(phase) * float(wave_amplitude)
            x1 += off
            x2 += off
        elif line_mode == "converge":
            ny = 0.5 if n == 1 else i / (n - 1)
            edge = abs(ny - 0.5) * 2.0
            new_w = w * (1.0 - (1.0 - edge) * strength)
            x1 = base_x - new_w / 2.0
            x2 = base_x + new_w / 2.0
        paths.append(line_path(x1, y, x2, y))
    return [Layer("horizontal_lines", tuple(paths))]
