"""
どこで: `src/plotweave/core/generators/circle_pack.py`。
何を: 重ならない円を棄却サンプリングで詰め、各円を閉パスとして出力する。
なぜ: 充填アルゴリズム（algorithms.packing）を配置領域の解決と切り離すため。
"""

from __future__ import annotations

import logging

from plotweave.core.algorithms.packing import pack_circles
from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import circle_path
from plotweave.core.model import Layer
from plotweave.core.unit_registry import generator

_logger = logging.getLogger(__name__)


@generator
def circle_pack(
    ctx: ExecutionContext,
    *,
    min_radius: float = 5.0,
    max_radius: float = 30.0,
    count: int = 50,
    padding: float = 2.0,
    max_attempts: int = 1000,
    segments: int = 32,
    centered: bool = True,
    area_width: float = 180.0,
    area_height: float = 180.0,
    position_x: float = 50.0,
    position_y: float = 50.0,
) -> list[Layer]:
    """円充填を生成する。

    Parameters
    ----------
    min_radius, max_radius : float
        半径の抽選範囲。
    count : int, default 50
        目標個数。試行上限に達した場合は少なくなる。
    padding : float, default 2.0
        円同士の最小すき間。
    max_attempts : int, default 1000
        試行回数の上限。
    segments : int, default 32
        円 1 周の分割数。
    centered : bool, default True
        True ならキャンバスから `max_radius + padding` の余白を除いた領域。
        False なら position_x/y [%] を中心とする area_width x area_height の領域。

    Returns
    -------
    list[Layer]
        id "circle_pack" の Layer 1 枚。
    """
    canvas = ctx.canvas
    if centered:
        margin = float(max_radius) + float(padding)
        bounds = (
            margin,
            margin,
            float(canvas.width) - 2.0 * margin,
            float(canvas.height) - 2.0 * margin,
        )
    else:
        w = float(area_width)
        h = float(area_height)
        bounds = (canvas.pct_x(position_x) - w / 2.0, canvas.pct_y(position_y) - h / 2.0, w, h)

    result = pack_circles(
        ctx.rng,
        bounds,
        min_radius=min_radius,
        max_radius=max_radius,
        count=count,
        padding=padding,
        max_attempts=max_attempts,
    )
    if len(result.circles) < int(count):
        _logger.debug(
            "circle_pack: %d/%d circles after %d attempts",
            len(result.circles),
            int(count),
            result.attempts,
        )
    paths = tuple(circle_path(c.x, c.y, c.r, int(segments)) for c in result.circles)
    return [Layer("circle_pack", paths)]
