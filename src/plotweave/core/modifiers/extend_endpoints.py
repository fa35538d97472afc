"""
どこで: `src/plotweave/core/modifiers/extend_endpoints.py`。
何を: 開パスの始点・終点の外側へ 1 点ずつ足して線を延長する。
なぜ: 線同士の継ぎ目を越えて描き足し、手描き風の「はみ出し」を作るため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams, calculate_falloff
from plotweave.core.model import Layer, Path, Point
from plotweave.core.unit_registry import modifier

DIRECTION_MODES: tuple[str, ...] = ("tangent", "radial", "vertical", "horizontal")
DIRECTIONS: tuple[str, ...] = ("outward", "inward", "both")

_MIN_DIRECTION_LENGTH = 1e-4


def _normalize(dx: float, dy: float) -> Point | None:
    length = math.hypot(dx, dy)
    if length < _MIN_DIRECTION_LENGTH:
        return None
    return (dx / length, dy / length)


def extension_direction(
    mode: str,
    endpoint: Point,
    neighbor: Point,
    at_end: bool,
    radial_center: Point,
) -> Point | None:
    """延長方向の単位ベクトル。求まらなければ None。

    tangent は隣接点から端点へ向かう向き。radial は中心から端点へ向かう向き。
    vertical / horizontal は端点が隣接点から離れる側の軸方向（同じ座標なら +y / +x 側）。
    """
    ex, ey = endpoint
    nx, ny = neighbor
    if mode == "tangent":
        return _normalize(ex - nx, ey - ny)
    if mode == "radial":
        return _normalize(ex - radial_center[0], ey - radial_center[1])
    if mode == "vertical":
        if at_end:
            return (0.0, -1.0 if ey < ny else 1.0)
        return (0.0, 1.0 if ey > ny else -1.0)
    if mode == "horizontal":
        if at_end:
            return (1.0 if ex > nx else -1.0, 0.0)
        return (-1.0 if ex < nx else 1.0, 0.0)
    return None


@modifier(falloff=True)
def extend_endpoints(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    extend_amount: float = 10.0,
    randomness: float = 50.0,
    extend_start: bool = True,
    extend_end: bool = True,
    direction_mode: str = "tangent",
    radial_center_x: float = 50.0,
    radial_center_y: float = 50.0,
    direction: str = "outward",
    debug_separate_layer: bool = False,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """開パスの両端を延長する。

    Parameters
    ----------
    extend_amount : float, default 10.0
        延長量 [mm]。端ごとに `amount * (1 + (rng - 0.5) * 2 * randomness%)` とする。
    direction_mode : {"tangent", "radial", "vertical", "horizontal"}, default "tangent"
        延長方向の決め方。未知の値では延長しない。
    direction : {"outward", "inward", "both"}, default "outward"
        "inward" は逆向き。"both" はパスごとに乱数で向きを選ぶ。
    debug_separate_layer : bool, default False
        True なら元パスは変えず、延長部分を 2 点パスとして同じ Layer の末尾に並べる。

    Notes
    -----
    閉パスと 2 点未満のパスはそのまま返す。
    共有乱数はパスごとに "both" の向き 1 回、終点 1 回、始点 1 回の順で消費する
    （方向が求まらない端は消費しない）。強度は各端点でのフォールオフを掛ける。
    """
    amount = float(extend_amount)
    rand = float(randomness) / 100.0
    canvas = ctx.canvas
    center = (canvas.pct_x(radial_center_x), canvas.pct_y(radial_center_y))
    rng = ctx.rng

    def _tip(endpoint: Point, unit: Point, sign: float) -> Point:
        ext = amount * (1.0 + (rng() - 0.5) * 2.0 * rand)
        s = calculate_falloff(endpoint, falloff, canvas)
        return (
            endpoint[0] + unit[0] * ext * s * sign,
            endpoint[1] + unit[1] * ext * s * sign,
        )

    out: list[Layer] = []
    for layer in layers:
        paths: list[Path] = []
        extensions: list[Path] = []
        for path in layer.paths:
            if path.closed or len(path) < 2:
                paths.append(path)
                continue
            pts = path.points
            if direction == "inward":
                sign = -1.0
            elif direction == "both":
                sign = 1.0 if rng() < 0.5 else -1.0
            else:
                sign = 1.0

            head: list[Point] = []
            tail: list[Point] = []
            if extend_end:
                unit = extension_direction(direction_mode, pts[-1], pts[-2], True, center)
                if unit is not None:
                    tip = _tip(pts[-1], unit, sign)
                    if debug_separate_layer:
                        extensions.append(Path.from_points([pts[-1], tip]))
                    else:
                        tail.append(tip)
            if extend_start:
                unit = extension_direction(direction_mode, pts[0], pts[1], False, center)
                if unit is not None:
                    tip = _tip(pts[0], unit, sign)
                    if debug_separate_layer:
                        extensions.append(Path.from_points([tip, pts[0]]))
                    else:
                        head.append(tip)

            if head or tail:
                before = np.asarray(head, dtype=np.float64).reshape(-1, 2)
                after = np.asarray(tail, dtype=np.float64).reshape(-1, 2)
                coords = np.concatenate([before, path.coords, after], axis=0)
                paths.append(path.with_coords(coords))
            else:
                paths.append(path)
        out.append(layer.with_paths(paths + extensions))
    return out
