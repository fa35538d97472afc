"""引力点（単数 / 円周上の複数）へ頂点を引き寄せる modifier。"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import centroid
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier

ATTRACTOR_FALLOFFS: tuple[str, ...] = ("linear", "quadratic", "smooth")

_MIN_DIST = 1e-3


def _influence(kind: str, t: np.ndarray) -> np.ndarray:
    c = np.clip(t, 0.0, 1.0)
    if kind == "quadratic":
        return (1.0 - c) * (1.0 - c)
    if kind == "smooth":
        return 1.0 - c * c * (3.0 - 2.0 * c)
    return 1.0 - c


def attraction(
    coords: np.ndarray,
    attractors: np.ndarray,
    strength: float,
    radius: float,
    kind: str,
) -> np.ndarray:
    """各頂点の変位 shape (N, 2) を返す。

    半径内（かつ距離 > 1e-3）の引力点ごとに `(a - p) * influence * strength` を加算する。
    strength が負なら反発になる。
    """
    v = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    out = np.zeros_like(v)
    r = float(radius)
    if r <= 0.0:
        return out
    for a in np.asarray(attractors, dtype=np.float64).reshape(-1, 2):
        delta = a[None, :] - v
        dist = np.sqrt(np.sum(delta * delta, axis=1))
        mask = (dist < r) & (dist > _MIN_DIST)
        pull = np.where(mask, _influence(kind, dist / r) * float(strength), 0.0)
        out += delta * pull[:, None]
    return out


@modifier
def attractor(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    attractor_x: float = 50.0,
    attractor_y: float = 50.0,
    strength: float = 50.0,
    radius: float = 100.0,
    falloff: str = "smooth",
    transform_mode: str = "deform",
    mode: str = "single",
    attractor_count: int = 3,
    multi_radius: float = 50.0,
) -> list[Layer]:
    """引力点へ引き寄せる。

    Parameters
    ----------
    attractor_x, attractor_y : float
        引力点（multi では配置円の中心）[%]。
    strength : float, default 50.0
        引き寄せの強さ [%]。負値は反発。
    radius : float, default 100.0
        影響半径 [mm]。
    falloff : {"linear", "quadratic", "smooth"}, default "smooth"
        距離減衰の形。空間フォールオフ（enable_falloff 系）とは別物。
    mode : {"single", "multi"}, default "single"
        multi は半径 multi_radius の円周上に attractor_count 個を等間隔に置く。
    """
    canvas = ctx.canvas
    bx = canvas.pct_x(attractor_x)
    by = canvas.pct_y(attractor_y)
    if mode == "single":
        points = np.array([[bx, by]], dtype=np.float64)
    else:
        n = max(0, int(attractor_count))
        ang = np.arange(n, dtype=np.float64) / max(1, n) * (2.0 * math.pi)
        points = np.stack(
            [bx + np.cos(ang) * float(multi_radius), by + np.sin(ang) * float(multi_radius)],
            axis=1,
        ).reshape(-1, 2)
    s = float(strength) / 100.0

    def _apply(path: Path) -> Path:
        if len(path) == 0:
            return path
        v = path.coords
        if transform_mode == "translate":
            c = np.asarray([centroid(v)], dtype=np.float64)
            return path.with_coords(v + attraction(c, points, s, radius, falloff)[0])
        return path.with_coords(v + attraction(v, points, s, radius, falloff))

    return map_paths(layers, _apply)
