"""
どこで: `src/plotweave/core/modifiers/randomize.py`。
何を: パスごとに拡大率・回転・位置・長さをランダムにばらつかせる。
なぜ: 同じ形の繰り返しに手描き風の不揃いさを与えるため。

乱数は共有乱数ではなく `seed` 引数から作る専用の乱数源を使う。
パイプライン上の位置を変えても同じばらつきが得られる。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams, calculate_falloff
from plotweave.core.geometry import centroid
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.rng import SeededRandom
from plotweave.core.unit_registry import modifier

LENGTH_MODES: tuple[str, ...] = ("trimEnd", "trimStart", "trimBoth")


def trim_points(coords: np.ndarray, trim_count: int, mode: str) -> np.ndarray:
    """頂点を trim_count 個取り除く。`0 < trim_count < N - 1` 以外は何もしない。"""
    n = int(coords.shape[0])
    if trim_count <= 0 or trim_count >= n - 1:
        return coords
    if mode == "trimEnd":
        return coords[: n - trim_count]
    if mode == "trimStart":
        return coords[trim_count:]
    head = trim_count // 2
    tail = trim_count - head
    return coords[head : n - tail]


@modifier(falloff=True)
def randomize(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    scale_variation: float = 0.0,
    scale_min: float = 0.5,
    scale_max: float = 1.5,
    rotation_variation: float = 0.0,
    position_variation: float = 0.0,
    length_variation: float = 0.0,
    length_mode: str = "trimEnd",
    seed: int = 12345,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """パス単位のランダムなばらつきを加える。

    Parameters
    ----------
    scale_variation : float, default 0.0
        拡大率のばらつき [%]。乱数で [scale_min, scale_max] から選んだ倍率へ寄せる。
    rotation_variation : float, default 0.0
        回転の最大量 [deg]（±）。
    position_variation : float, default 0.0
        平行移動の最大量 [mm]（±、軸ごと）。
    length_variation : float, default 0.0
        頂点を取り除く最大割合 [%]。3 点以上のパスのみ。
    length_mode : {"trimEnd", "trimStart", "trimBoth"}, default "trimEnd"
        取り除く側。
    seed : int, default 12345
        専用乱数源のシード。

    Notes
    -----
    1 パスにつき、有効な項目（拡大率 → 回転 → 位置 2 回 → 長さ）の乱数を先に順に消費し、
    ばらつきが 0 の項目の分（拡大率 1・回転 1・位置 2・長さ 1）をその後にまとめて消費する。
    length_variation > 0 で 2 点のパスは長さ分を消費しない。点数 2 未満のパスは乱数を消費せずそのまま返す。
    強度は変形前のパス重心で評価する。頂点を取り除いたパスは開パスになる。
    """
    s_var = float(scale_variation) / 100.0
    r_var = math.radians(float(rotation_variation))
    p_var = float(position_variation)
    l_var = float(length_variation) / 100.0
    lo = float(scale_min)
    hi = float(scale_max)
    rng = SeededRandom(int(seed))
    skipped = (s_var <= 0.0) + (r_var <= 0.0) + 2 * (p_var <= 0.0) + (l_var <= 0.0)

    def _apply(path: Path) -> Path:
        n = len(path)
        if n < 2:
            return path
        v = path.coords
        c = np.asarray(centroid(v), dtype=np.float64)
        strength = calculate_falloff((float(c[0]), float(c[1])), falloff, ctx.canvas)

        pts = v
        if s_var > 0.0:
            k = 1.0 + ((lo + rng() * (hi - lo)) - 1.0) * s_var * strength
            pts = c + (pts - c) * k

        if r_var > 0.0:
            a = (rng() - 0.5) * 2.0 * r_var * strength
            cos_a = math.cos(a)
            sin_a = math.sin(a)
            d = pts - c
            pts = c + np.stack(
                [d[:, 0] * cos_a - d[:, 1] * sin_a, d[:, 0] * sin_a + d[:, 1] * cos_a], axis=1
            )

        if p_var > 0.0:
            dx = (rng() - 0.5) * 2.0 * p_var * strength
            dy = (rng() - 0.5) * 2.0 * p_var * strength
            pts = pts + np.array([dx, dy], dtype=np.float64)

        if l_var > 0.0 and n > 2:
            trim = int(math.floor(rng() * l_var * strength * n))
            pts = trim_points(pts, trim, length_mode)

        # 無効な項目の分は最後にまとめて消費する。
        rng.skip(skipped)
        closed = path.closed and pts.shape[0] == n
        return Path(pts, closed=closed)

    return map_paths(layers, _apply)
