"""中心からの距離に応じて角度方向にねじる modifier。"""

from __future__ import annotations

import math
from collections.abc import Sequence

from plotweave.core.algorithms.twist import twist_coords
from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams, falloff_strengths
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier


@modifier(falloff=True)
def twist(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    twist_amount: float = 180.0,
    center_x: float = 50.0,
    center_y: float = 50.0,
    twist_profile: str = "linear",
    inner_radius: float = 0.0,
    outer_radius: float = 200.0,
    include_radial_wave: bool = False,
    wave_frequency: float = 6.0,
    wave_amplitude: float = 10.0,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """距離プロファイルに応じて中心まわりにねじる。

    Parameters
    ----------
    layers : Sequence[Layer]
        入力 Layer 列。
    twist_amount : float, default 180.0
        最大ねじれ角 [deg]。
    center_x, center_y : float, default 50.0
        ねじり中心 [%]。
    twist_profile : {"linear","ease-in","ease-out","ease-in-out","inverse"}, default "linear"
        正規化半径 → ねじれ係数の写像。"inverse" は中心ほど強くねじる。
    inner_radius, outer_radius : float
        係数を 0→1 に割り当てる半径帯 [mm]。outer <= inner のときはステップ関数。
    include_radial_wave : bool, default False
        True ならねじり後の角度で半径を sin 変調する。
    wave_frequency, wave_amplitude : float
        半径方向リップルの周波数と振幅 [mm]。
    falloff : FalloffParams
        元の点で評価した強度を、ねじれ角・リップル・最終補間の全てに掛ける。

    Returns
    -------
    list[Layer]
        ねじり適用後の Layer 列。
    """
    twist_rad = math.radians(float(twist_amount))
    if twist_rad == 0.0 and not (include_radial_wave and float(wave_amplitude) > 0.0):
        return list(layers)

    center = (ctx.canvas.pct_x(center_x), ctx.canvas.pct_y(center_y))

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        strength = falloff_strengths(path.coords, falloff, ctx.canvas)
        out = twist_coords(
            path.coords,
            center,
            twist_rad,
            str(twist_profile),
            float(inner_radius),
            float(outer_radius),
            strength,
            radial_wave=bool(include_radial_wave),
            wave_frequency=float(wave_frequency),
            wave_amplitude=float(wave_amplitude),
        )
        return path.with_coords(out)

    return map_paths(layers, _apply)
