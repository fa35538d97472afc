# src/plotweave/core/model.py
# パイプラインを流れる Point / Path / Layer / CanvasSettings の不変データモデル。

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np


Point = tuple[float, float]
"""キャンバス座標上の 1 点 `(x, y)`。

Notes
-----
API 境界では tuple で受け渡し、Path 内部では float64 配列 `(N,2)` の 1 行として保持する。
"""


@dataclass(frozen=True, slots=True)
class Path:
    """順序付き点列と閉フラグからなるパスを表現する。

    Parameters
    ----------
    coords : np.ndarray
        float64 型 shape (N, 2) の頂点配列。
    closed : bool
        True なら終点から始点への辺を暗黙に持つ。

    Notes
    -----
    不変性を契約とし、配列は writeable=False で保持する。
    点数 2 未満のパスは縮退パスとして許容する（検証で弾かない）。
    """

    coords: np.ndarray
    closed: bool = False

    def __post_init__(self) -> None:
        """配列形状を検証し、不変条件を満たす形に固定する。"""
        coords = np.asarray(self.coords)

        if coords.size == 0:
            coords = np.zeros((0, 2), dtype=np.float64)

        if coords.ndim != 2 or coords.shape[1] != 2:
            raise ValueError(
                f"coords は shape (N,2) の 2 次元配列である必要がある: shape={coords.shape}"
            )

        if coords.dtype != np.float64:
            coords = coords.astype(np.float64)
        elif coords.flags.writeable:
            # 呼び出し側が元配列を書き換えても影響しないようコピーを持つ。
            coords = coords.copy()

        coords.setflags(write=False)

        object.__setattr__(self, "coords", coords)
        object.__setattr__(self, "closed", bool(self.closed))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]], closed: bool = False) -> Path:
        """`(x, y)` の列から Path を生成する。"""
        pts = [(float(p[0]), float(p[1])) for p in points]
        if not pts:
            return cls(np.zeros((0, 2), dtype=np.float64), closed=closed)
        return cls(np.asarray(pts, dtype=np.float64), closed=closed)

    @property
    def points(self) -> list[Point]:
        """頂点を `(x, y)` タプルのリストとして返す。"""
        return [(float(x), float(y)) for x, y in self.coords]

    @property
    def is_degenerate(self) -> bool:
        """点数 2 未満なら True。"""
        return int(self.coords.shape[0]) < 2

    def with_coords(self, coords: np.ndarray) -> Path:
        """closed を引き継いだまま座標だけ差し替えた Path を返す。"""
        return Path(coords, closed=self.closed)

    def __len__(self) -> int:
        return int(self.coords.shape[0])


@dataclass(frozen=True, slots=True)
class Layer:
    """名前付きのパス集合（出力のグルーピング単位）。

    Parameters
    ----------
    id : str
        人間向けのタグ。大域一意である保証はない。
    paths : tuple[Path, ...]
        所属するパス列。
    """

    id: str
    paths: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        paths = tuple(self.paths)
        for p in paths:
            if not isinstance(p, Path):
                raise TypeError(f"Layer.paths には Path だけを渡してください: {type(p)!r}")
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "paths", paths)

    def with_paths(self, paths: Iterable[Path]) -> Layer:
        """id を維持したままパス列を差し替えた Layer を返す。"""
        return Layer(id=self.id, paths=tuple(paths))

    @property
    def point_count(self) -> int:
        """全パスの頂点数の合計。"""
        return sum(len(p) for p in self.paths)


@dataclass(frozen=True, slots=True)
class CanvasSettings:
    """キャンバス寸法。パーセント指定のパラメータはこの枠で解決する。"""

    width: float
    height: float
    units: str = "mm"

    def pct_x(self, pct: float) -> float:
        """X 方向のパーセント値をキャンバス座標に変換する。"""
        return (float(pct) / 100.0) * float(self.width)

    def pct_y(self, pct: float) -> float:
        """Y 方向のパーセント値をキャンバス座標に変換する。"""
        return (float(pct) / 100.0) * float(self.height)

    @property
    def center(self) -> Point:
        return (float(self.width) / 2.0, float(self.height) / 2.0)

    def anchor(self, centered: bool, position_x: float, position_y: float) -> Point:
        """centered ならキャンバス中心、そうでなければパーセント位置を返す。"""
        if centered:
            return self.center
        return (self.pct_x(position_x), self.pct_y(position_y))


CANVAS_PRESETS: dict[str, CanvasSettings] = {
    "A4": CanvasSettings(210.0, 297.0),
    "A3": CanvasSettings(297.0, 420.0),
    "Letter": CanvasSettings(216.0, 279.0),
    "24x36": CanvasSettings(610.0, 914.0),
    "12x12": CanvasSettings(305.0, 305.0),
    "8x10": CanvasSettings(203.0, 254.0),
}
"""名前付きキャンバスプリセット（単位 mm）。"""


def empty_layer(layer_id: str) -> Layer:
    """パスを持たない Layer を返す。"""
    return Layer(id=layer_id, paths=())


def concat_layers(*groups: Sequence[Layer]) -> list[Layer]:
    """複数の Layer 列を順序を保って 1 つのリストに連結する。

    Parameters
    ----------
    groups : Sequence[Layer]
        連結対象の Layer 列。

    Returns
    -------
    list[Layer]
        連結後の Layer 列（Layer 自体はコピーしない）。
    """
    out: list[Layer] = []
    for group in groups:
        out.extend(group)
    return out


def iter_paths(layers: Iterable[Layer]) -> Iterable[Path]:
    """Layer 列に含まれる全パスを描画順に列挙する。"""
    for layer in layers:
        yield from layer.paths


def map_paths(layers: Iterable[Layer], fn: Callable[[Path], Path]) -> list[Layer]:
    """各パスへ fn を適用した Layer 列を返す（id は維持）。"""
    return [layer.with_paths(fn(p) for p in layer.paths) for layer in layers]


def flat_map_paths(layers: Iterable[Layer], fn: Callable[[Path], Iterable[Path]]) -> list[Layer]:
    """各パスを 0 本以上のパスへ展開した Layer 列を返す（id は維持）。"""
    return [
        layer.with_paths(q for p in layer.paths for q in fn(p))
        for layer in layers
    ]


__all__ = [
    "CANVAS_PRESETS",
    "CanvasSettings",
    "Layer",
    "Path",
    "Point",
    "concat_layers",
    "empty_layer",
    "flat_map_paths",
    "iter_paths",
    "map_paths",
]
