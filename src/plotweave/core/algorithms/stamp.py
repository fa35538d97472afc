"""
どこで: `src/plotweave/core/algorithms/stamp.py`。
何を: 補助入力のパス群（スタンプ）を、アンカー基準でスケール・回転して任意位置へ配置する。
なぜ: grid / scatter_points / flow_field が同じ配置規則を共有できるようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from plotweave.core.model import Layer, Path, Point
from plotweave.core.rng import SeededRandom

STAMP_ROTATION_MODES: tuple[str, ...] = ("fixed", "random", "follow")

STAMP_DEFAULTS: dict[str, Any] = {
    "stamp_scale": 1.0,
    "stamp_rotation": "fixed",
    "stamp_random_rotation": 180.0,
}
"""スタンプ対応 generator が共通で受け付ける引数とその既定値。"""


@dataclass(frozen=True, slots=True)
class StampSettings:
    """スタンプ配置の設定。

    Attributes
    ----------
    scale : float
        アンカー基準の等方スケール。
    rotation : str
        "fixed" / "random" / "follow"。
    random_rotation : float
        rotation="random" のときの最大回転量 [deg]（±）。
    """

    scale: float = 1.0
    rotation: str = "fixed"
    random_rotation: float = 180.0


def stamp_settings(params: Mapping[str, Any]) -> StampSettings:
    """引数 mapping からスタンプ設定を取り出す。"""
    return StampSettings(
        scale=float(params.get("stamp_scale", STAMP_DEFAULTS["stamp_scale"])),
        rotation=str(params.get("stamp_rotation", STAMP_DEFAULTS["stamp_rotation"])),
        random_rotation=float(
            params.get("stamp_random_rotation", STAMP_DEFAULTS["stamp_random_rotation"])
        ),
    )


def has_stamp(layers: Sequence[Layer] | None) -> bool:
    """スタンプとして使えるパスが 1 本でもあれば True。"""
    if not layers:
        return False
    return any(len(layer.paths) > 0 for layer in layers)


def stamp_center(layers: Sequence[Layer]) -> Point:
    """全スタンプ頂点の重心。頂点が無ければ (0, 0)。"""
    chunks = [p.coords for layer in layers for p in layer.paths if len(p) > 0]
    if not chunks:
        return (0.0, 0.0)
    m = np.concatenate(chunks, axis=0).mean(axis=0)
    return (float(m[0]), float(m[1]))


def place_stamp(
    layers: Sequence[Layer],
    anchor: Point,
    target_x: float,
    target_y: float,
    scale: float,
    rotation_rad: float,
) -> list[Path]:
    """スタンプをアンカー基準で変換し、アンカーが target に来るよう配置する。

    Parameters
    ----------
    layers : Sequence[Layer]
        スタンプのパス群。
    anchor : Point
        スタンプ側の基準点（通常は `stamp_center`）。
    target_x, target_y : float
        配置先。
    scale : float
        等方スケール。
    rotation_rad : float
        回転角 [rad]。

    Returns
    -------
    list[Path]
        配置後のパス。closed は元のパスを引き継ぐ。
    """
    c = math.cos(float(rotation_rad))
    s = math.sin(float(rotation_rad))
    ax, ay = float(anchor[0]), float(anchor[1])
    target = np.array([float(target_x), float(target_y)], dtype=np.float64)
    rot = np.array([[c, s], [-s, c]], dtype=np.float64)

    out: list[Path] = []
    for layer in layers:
        for path in layer.paths:
            rel = (path.coords - np.array([ax, ay], dtype=np.float64)) * float(scale)
            # 行ベクトル表現での回転（x' = x c - y s, y' = x s + y c）。
            out.append(Path(rel @ rot + target, closed=path.closed))
    return out


def stamp_rotation(
    mode: str,
    rng: SeededRandom,
    amount_deg: float,
    direction_rad: float | None = None,
) -> float:
    """配置 1 回分の回転角 [rad] を返す。

    "random" のときだけ乱数を 1 回消費する。
    """
    if mode == "random":
        max_rad = math.radians(float(amount_deg))
        return (rng() * 2.0 - 1.0) * max_rad
    if mode == "follow":
        return 0.0 if direction_rad is None else float(direction_rad)
    return 0.0


__all__ = [
    "STAMP_DEFAULTS",
    "STAMP_ROTATION_MODES",
    "StampSettings",
    "has_stamp",
    "place_stamp",
    "stamp_center",
    "stamp_rotation",
    "stamp_settings",
]
