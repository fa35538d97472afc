"""中心からの距離プロファイルに応じた角度ねじり（極座標回転）。"""

from __future__ import annotations

import numpy as np

from plotweave.core.easing import apply_curve
from plotweave.core.falloff import blend_coords


def radial_position(dist: np.ndarray, inner_radius: float, outer_radius: float) -> np.ndarray:
    """距離を [inner, outer] 帯の中での正規化位置 [0, 1] に変換する。

    outer <= inner のときはステップ関数（inner より外なら 1）。
    """
    d = np.asarray(dist, dtype=np.float64)
    inner = float(inner_radius)
    outer = float(outer_radius)
    if outer <= inner:
        return np.where(d > inner, 1.0, 0.0)
    return np.clip((d - inner) / (outer - inner), 0.0, 1.0)


def twist_coords(
    coords: np.ndarray,
    center: tuple[float, float],
    twist_rad: float,
    profile: str,
    inner_radius: float,
    outer_radius: float,
    strength: np.ndarray,
    *,
    radial_wave: bool = False,
    wave_frequency: float = 6.0,
    wave_amplitude: float = 10.0,
) -> np.ndarray:
    """頂点を中心まわりにねじる。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2)。
    center : tuple[float, float]
        ねじり中心（キャンバス座標）。
    twist_rad : float
        最大ねじれ角 [rad]。
    profile : str
        "linear" / "ease-in" / "ease-out" / "ease-in-out" / "inverse"。
    inner_radius, outer_radius : float
        プロファイルを 0→1 に割り当てる半径帯。
    strength : np.ndarray
        shape (N,) の効果強度（元の点で評価したフォールオフ）。
    radial_wave : bool
        True なら、ねじり後の角度に対する sin で半径を揺らす。
    wave_frequency, wave_amplitude : float
        半径方向リップルの周波数と振幅。

    Returns
    -------
    np.ndarray
        強度で元の点と補間済みの座標。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    if v.shape[0] == 0:
        return v
    s = np.asarray(strength, dtype=np.float64).reshape(-1)

    cx, cy = float(center[0]), float(center[1])
    dx = v[:, 0] - cx
    dy = v[:, 1] - cy
    dist = np.sqrt(dx * dx + dy * dy)
    angle = np.arctan2(dy, dx)

    factor = apply_curve(profile, radial_position(dist, inner_radius, outer_radius))
    new_angle = angle + float(twist_rad) * factor * s

    new_dist = dist
    if radial_wave and float(wave_amplitude) > 0.0:
        ripple = np.sin(new_angle * float(wave_frequency)) * float(wave_amplitude) * s
        new_dist = np.maximum(0.0, dist + ripple)

    twisted = np.empty_like(v)
    twisted[:, 0] = cx + np.cos(new_angle) * new_dist
    twisted[:, 1] = cy + np.sin(new_angle) * new_dist
    return blend_coords(v, twisted, s)


__all__ = ["radial_position", "twist_coords"]
