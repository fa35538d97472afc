"""
どこで: `src/plotweave/core/falloff.py`。
何を: 空間フォールオフ（中心からの距離に応じた効果強度）と、元形状との補間を提供する。
なぜ: modifier ごとに同じ重み付けを重複実装せず、登録時の宣言だけで使えるようにするため。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from plotweave.core.easing import FALLOFF_CURVES, apply_curve
from plotweave.core.model import CanvasSettings, Point

FALLOFF_SHAPES: tuple[str, ...] = ("radial", "horizontal", "vertical")

FALLOFF_DEFAULTS: dict[str, Any] = {
    "enable_falloff": False,
    "falloff_x": 50.0,
    "falloff_y": 50.0,
    "falloff_radius": 100.0,
    "falloff_curve": "linear",
    "invert_falloff": False,
    "falloff_shape": "radial",
}
"""falloff 対応 modifier が共通で受け付ける引数とその既定値。"""


@dataclass(frozen=True, slots=True)
class FalloffParams:
    """フォールオフ設定。

    Attributes
    ----------
    enabled : bool
        False なら強度は常に 1。
    center_x, center_y : float
        中心位置（キャンバスに対するパーセント）。
    radius : float
        強度が 0 になる距離 [mm]。
    curve : str
        "linear" / "ease-in" / "ease-out" / "ease-in-out"。
    invert : bool
        True なら強度を `1 - s` に反転する。
    shape : str
        "radial"（ユークリッド距離）/ "horizontal"（|dx|）/ "vertical"（|dy|）。
    """

    enabled: bool = False
    center_x: float = 50.0
    center_y: float = 50.0
    radius: float = 100.0
    curve: str = "linear"
    invert: bool = False
    shape: str = "radial"

    def __post_init__(self) -> None:
        curve = str(self.curve)
        if curve not in FALLOFF_CURVES:
            curve = "linear"
        shape = str(self.shape)
        if shape not in FALLOFF_SHAPES:
            shape = "radial"
        object.__setattr__(self, "enabled", bool(self.enabled))
        object.__setattr__(self, "center_x", float(self.center_x))
        object.__setattr__(self, "center_y", float(self.center_y))
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "curve", curve)
        object.__setattr__(self, "invert", bool(self.invert))
        object.__setattr__(self, "shape", shape)


DISABLED_FALLOFF = FalloffParams()


def falloff_params(params: Mapping[str, Any]) -> FalloffParams:
    """引数 mapping からフォールオフ設定を取り出す。

    `enable_falloff` / `invert_falloff` は `True` のときだけ有効とみなす。
    """
    enabled = params.get("enable_falloff") is True
    invert = params.get("invert_falloff") is True
    return FalloffParams(
        enabled=enabled,
        center_x=float(params.get("falloff_x", FALLOFF_DEFAULTS["falloff_x"])),
        center_y=float(params.get("falloff_y", FALLOFF_DEFAULTS["falloff_y"])),
        radius=float(params.get("falloff_radius", FALLOFF_DEFAULTS["falloff_radius"])),
        curve=str(params.get("falloff_curve", FALLOFF_DEFAULTS["falloff_curve"])),
        invert=invert,
        shape=str(params.get("falloff_shape", FALLOFF_DEFAULTS["falloff_shape"])),
    )


def falloff_strengths(
    coords: np.ndarray,
    falloff: FalloffParams,
    canvas: CanvasSettings,
) -> np.ndarray:
    """各頂点のフォールオフ強度を返す。

    Parameters
    ----------
    coords : np.ndarray
        shape (N, 2) の座標配列。
    falloff : FalloffParams
        フォールオフ設定。
    canvas : CanvasSettings
        中心位置の解決に使うキャンバス。

    Returns
    -------
    np.ndarray
        shape (N,) の float64 配列。値域は [0, 1]。
    """
    pts = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    n = int(pts.shape[0])
    if not falloff.enabled:
        return np.ones((n,), dtype=np.float64)

    cx = canvas.pct_x(falloff.center_x)
    cy = canvas.pct_y(falloff.center_y)
    dx = pts[:, 0] - cx
    dy = pts[:, 1] - cy
    if falloff.shape == "horizontal":
        dist = np.abs(dx)
    elif falloff.shape == "vertical":
        dist = np.abs(dy)
    else:
        dist = np.sqrt(dx * dx + dy * dy)

    if falloff.radius > 0.0:
        norm = np.minimum(1.0, dist / falloff.radius)
    else:
        # 半径 0 は中心ちょうどの点だけを効果対象にする。
        norm = np.where(dist <= 0.0, 0.0, 1.0)

    strength = apply_curve(falloff.curve, 1.0 - norm)
    if falloff.invert:
        strength = 1.0 - strength
    return np.asarray(strength, dtype=np.float64).reshape(n)


def calculate_falloff(point: Point, falloff: FalloffParams, canvas: CanvasSettings) -> float:
    """1 点のフォールオフ強度を返す（無効時は 1）。"""
    if not falloff.enabled:
        return 1.0
    arr = np.asarray([point], dtype=np.float64)
    return float(falloff_strengths(arr, falloff, canvas)[0])


def lerp_with_falloff(original: float, transformed: float, strength: float) -> float:
    """`original + (transformed - original) * strength` を返す。

    strength が 0 / 1 のときは丸め誤差なく端点そのものを返す。
    """
    s = float(strength)
    if s == 0.0:
        return float(original)
    if s == 1.0:
        return float(transformed)
    return float(original) + (float(transformed) - float(original)) * s


def blend_coords(
    original: np.ndarray,
    transformed: np.ndarray,
    strength: np.ndarray,
) -> np.ndarray:
    """`lerp_with_falloff` の配列版。strength は shape (N,)。"""
    a = np.asarray(original, dtype=np.float64)
    b = np.asarray(transformed, dtype=np.float64)
    s = np.asarray(strength, dtype=np.float64).reshape(-1, 1)
    out = a + (b - a) * s
    out = np.where(s == 0.0, a, out)
    out = np.where(s == 1.0, b, out)
    return out


__all__ = [
    "DISABLED_FALLOFF",
    "FALLOFF_DEFAULTS",
    "FALLOFF_SHAPES",
    "FalloffParams",
    "blend_coords",
    "calculate_falloff",
    "falloff_params",
    "falloff_strengths",
    "lerp_with_falloff",
]
