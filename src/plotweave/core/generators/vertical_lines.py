"""
どこで: `src/plotweave/core/generators/vertical_lines.py`。
何を: 高さと縦位置を行ごとに変えられる垂直線の列を生成する。
なぜ: バーコード状・波形状の縦線パターンを 1 unit で作れるようにするため。
"""

from __future__ import annotations

import math

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import fbm, line_path
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

HEIGHT_MODES: tuple[str, ...] = ("uniform", "random", "gradient", "wave", "noise")
GRADIENT_DIRECTIONS: tuple[str, ...] = ("left-right", "right-left", "center-out", "edges-in")
ALIGNMENTS: tuple[str, ...] = ("bottom", "top", "center", "random", "wave", "noise")

# 縦位置ノイズはシードと y をずらして高さノイズと独立させる。
_ALIGN_SEED_OFFSET = 500
_ALIGN_NOISE_Y = 100.0


def _height_factor(
    mode: str,
    t: float,
    x: float,
    ctx: ExecutionContext,
    *,
    gradient_direction: str,
    wave_frequency: float,
    wave_phase_rad: float,
    noise_scale: float,
    noise_octaves: int,
) -> float:
    if mode == "random":
        return ctx.rng()
    if mode == "gradient":
        if gradient_direction == "right-left":
            return 1.0 - t
        if gradient_direction == "center-out":
            return abs(t - 0.5) * 2.0
        if gradient_direction == "edges-in":
            return 1.0 - abs(t - 0.5) * 2.0
        return t
    if mode == "wave":
        return (math.sin(t * 2.0 * math.pi * wave_frequency + wave_phase_rad) + 1.0) / 2.0
    if mode == "noise":
        return fbm(x, 0.0, noise_scale, noise_octaves, ctx.seed)
    return 1.0


def _height_falloff(distance: float, radius: float, curve: str, invert: bool) -> float:
    """中心からの距離に対する高さの減衰（1 - 距離/半径 をカーブで整形）。"""
    n = min(1.0, distance / radius) if radius > 0.0 else (0.0 if distance <= 0.0 else 1.0)
    if curve == "ease-in":
        s = 1.0 - n * n
    elif curve == "ease-out":
        s = (1.0 - n) * (1.0 - n)
    elif curve == "ease-in-out":
        s = 1.0 - 2.0 * n * n if n < 0.5 else 2.0 * (1.0 - n) * (1.0 - n)
    else:
        s = 1.0 - n
    return 1.0 - s if invert else s


@generator
def vertical_lines(
    ctx: ExecutionContext,
    *,
    line_count: int = 20,
    spacing: float = 10.0,
    centered: bool = True,
    position_x: float = 50.0,
    height_mode: str = "uniform",
    height_min: float = 50.0,
    height_max: float = 100.0,
    gradient_direction: str = "left-right",
    wave_frequency: float = 2.0,
    wave_phase: float = 0.0,
    noise_scale: float = 0.02,
    noise_octaves: int = 2,
    alignment: str = "center",
    alignment_base: float = 50.0,
    alignment_wave_freq: float = 2.0,
    alignment_wave_amp: float = 20.0,
    alignment_noise_scale: float = 0.02,
    alignment_noise_amp: float = 20.0,
    enable_height_falloff: bool = False,
    falloff_center_x: float = 50.0,
    falloff_center_y: float = 50.0,
    falloff_radius: float = 100.0,
    falloff_curve: str = "linear",
    invert_falloff: bool = False,
) -> list[Layer]:
    """spacing 間隔で垂直線を並べる。

    Parameters
    ----------
    line_count : int, default 20
        本数。
    spacing : float, default 10.0
        線の間隔 [mm]。
    centered : bool, default True
        True ならキャンバス中央に揃える。False なら position_x [%] を中心にする。
    height_mode : {"uniform", "random", "gradient", "wave", "noise"}, default "uniform"
        高さ係数 f∈[0,1] の決め方。高さは `height_min + f * (height_max - height_min)`。
        "random" は 1 本につき共有乱数を 1 回消費する。
    gradient_direction : {"left-right", "right-left", "center-out", "edges-in"}
        "gradient" の向き。
    wave_phase : float, default 0.0
        "wave" の位相 [deg]。
    alignment : {"bottom", "top", "center", "random", "wave", "noise"}, default "center"
        縦位置。基準線は alignment_base [%]。"bottom" は基準線から上へ、"top" は下へ伸ばす。
        それ以外は基準線を中心にし、"random" / "wave" / "noise" はさらに上下にずらす。
        "random" は 1 本につき共有乱数を 1 回消費し、振幅に alignment_wave_amp を使う。
    enable_height_falloff : bool, default False
        True なら (x, 基準線) と中心の距離で高さ係数を減衰させる。

    Returns
    -------
    list[Layer]
        id "vertical_lines" の Layer 1 枚。
    """
    canvas = ctx.canvas
    n = max(0, int(line_count))
    sp = float(spacing)
    total = (n - 1) * sp
    if centered:
        start_x = (float(canvas.width) - total) / 2.0
    else:
        start_x = canvas.pct_x(position_x) - total / 2.0

    base_y = canvas.pct_y(alignment_base)
    fcx = canvas.pct_x(falloff_center_x)
    fcy = canvas.pct_y(falloff_center_y)
    h_min = float(height_min)
    h_max = float(height_max)
    phase = math.radians(float(wave_phase))

    paths: list[Path] = []
    for i in range(n):
        x = start_x + i * sp
        t = i / (n - 1) if n > 1 else 0.5

        f = _height_factor(
            height_mode,
            t,
            x,
            ctx,
            gradient_direction=gradient_direction,
            wave_frequency=float(wave_frequency),
            wave_phase_rad=phase,
            noise_scale=float(noise_scale),
            noise_octaves=int(noise_octaves),
        )
        if enable_height_falloff:
            d = math.hypot(x - fcx, base_y - fcy)
            f *= _height_falloff(d, float(falloff_radius), falloff_curve, bool(invert_falloff))
        h = h_min + f * (h_max - h_min)

        offset = 0.0
        if alignment == "random":
            offset = (ctx.rng() - 0.5) * 2.0 * float(alignment_wave_amp)
        elif alignment == "wave":
            offset = math.sin(t * 2.0 * math.pi * float(alignment_wave_freq)) * float(
                alignment_wave_amp
            )
        elif alignment == "noise":
            nv = fbm(
                x,
                _ALIGN_NOISE_Y,
                float(alignment_noise_scale),
                2,
                ctx.seed + _ALIGN_SEED_OFFSET,
            )
            offset = (nv - 0.5) * 2.0 * float(alignment_noise_amp)

        if alignment == "bottom":
            y1, y2 = base_y, base_y - h
        elif alignment == "top":
            y1, y2 = base_y, base_y + h
        else:
            y1 = base_y - h / 2.0 + offset
            y2 = base_y + h / 2.0 + offset
        paths.append(line_path(x, y1, x, y2))
    return [Layer("vertical_lines", tuple(paths))]
