"""falloff / twist で共有するイージング曲線。"""

from __future__ import annotations

from typing import Callable

import numpy as np

FALLOFF_CURVES: tuple[str, ...] = ("linear", "ease-in", "ease-out", "ease-in-out")
TWIST_PROFILES: tuple[str, ...] = (*FALLOFF_CURVES, "inverse")


def _linear(t: np.ndarray) -> np.ndarray:
    return t


def _ease_in(t: np.ndarray) -> np.ndarray:
    return t * t


def _ease_out(t: np.ndarray) -> np.ndarray:
    u = 1.0 - t
    return 1.0 - u * u


def _ease_in_out(t: np.ndarray) -> np.ndarray:
    v = -2.0 * t + 2.0
    return np.where(t < 0.5, 2.0 * t * t, 1.0 - (v * v) / 2.0)


def _inverse(t: np.ndarray) -> np.ndarray:
    return 1.0 - t


_CURVES: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "linear": _linear,
    "ease-in": _ease_in,
    "ease-out": _ease_out,
    "ease-in-out": _ease_in_out,
    "inverse": _inverse,
}


def apply_curve(name: str, t: np.ndarray | float) -> np.ndarray:
    """名前付きイージング曲線を適用する。

    Parameters
    ----------
    name : str
        曲線名。未知の名前は "linear" として扱う。
    t : np.ndarray or float
        入力値。事前に [0, 1] へクランプされる。

    Returns
    -------
    np.ndarray
        曲線適用後の値（float64）。スカラー入力では 0 次元配列。
    """
    arr = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    fn = _CURVES.get(str(name), _linear)
    return np.asarray(fn(arr), dtype=np.float64)


def ease(name: str, t: float) -> float:
    """スカラー版の `apply_curve`。"""
    return float(apply_curve(name, float(t)))


__all__ = ["FALLOFF_CURVES", "TWIST_PROFILES", "apply_curve", "ease"]
