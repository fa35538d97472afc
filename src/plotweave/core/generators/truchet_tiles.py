"""
どこで: `src/plotweave/core/generators/truchet_tiles.py`。
何を: 90° 単位で回転させたタイル（円弧 / 対角線 / S 字 / U ターン）を敷き詰める Truchet パターン。
なぜ: タイルの向きの組み合わせだけで連続した曲線模様を作るため。

タイル内の図形はタイル中心を原点とするローカル座標で作り、回転してから配置する。
平行線は `(i - (line_count - 1) / 2) * line_spacing` のオフセットで帯状に複製する。
"""

from __future__ import annotations

import math

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.model import Layer, Path
from plotweave.core.unit_registry import generator

TILE_TYPES: tuple[str, ...] = ("arcs", "lines", "mixed", "curves")
CORNER_STYLES: tuple[str, ...] = ("rounded", "sharp")

_MIN_RADIUS = 0.01
_UTURN_RADIUS_RATIO = 0.45
_SCURVE_AMPLITUDE_RATIO = 0.4
_CURVE_PATTERNS: tuple[str, ...] = ("arcs", "scurve", "uturn")

# 回転 k（90° 単位、時計回り）の 2x2 行列。行ベクトル @ 行列 で適用する。
_ROTATIONS: tuple[np.ndarray, ...] = (
    np.array([[1.0, 0.0], [0.0, 1.0]]),
    np.array([[0.0, 1.0], [-1.0, 0.0]]),
    np.array([[-1.0, 0.0], [0.0, -1.0]]),
    np.array([[0.0, -1.0], [1.0, 0.0]]),
)


def _quarter_arc(cx: float, cy: float, r: float, start: float, segments: int) -> np.ndarray:
    angle = start + np.arange(segments + 1, dtype=np.float64) / segments * (math.pi / 2.0)
    return np.stack([cx + np.cos(angle) * r, cy + np.sin(angle) * r], axis=1)


def _arc_shapes(half: float, offset: float, segments: int, corner_style: str) -> list[np.ndarray]:
    """向かい合う 2 隅を中心とする 1/4 円弧（sharp なら辺中点を結ぶ直線）。"""
    if corner_style == "sharp":
        s = offset / math.sqrt(2.0)
        return [
            np.array([[s, -half + s], [-half + s, s]]),
            np.array([[-s, half - s], [half - s, -s]]),
        ]
    out = []
    r1 = half + offset
    if r1 > _MIN_RADIUS:
        out.append(_quarter_arc(-half, -half, r1, 0.0, segments))
    r2 = half - offset
    if r2 > _MIN_RADIUS:
        out.append(_quarter_arc(half, half, r2, math.pi, segments))
    return out


def _line_shapes(half: float, offset: float) -> list[np.ndarray]:
    s = offset / math.sqrt(2.0)
    return [np.array([[half + s, -half + s], [-half + s, half + s]])]


def _scurve_shapes(half: float, offset: float, segments: int) -> list[np.ndarray]:
    t = np.arange(segments + 1, dtype=np.float64) / segments
    y = -half + t * 2.0 * half
    x = offset + np.sin(t * math.pi) * half * _SCURVE_AMPLITUDE_RATIO
    return [np.stack([x, y], axis=1)]


def _uturn_shapes(half: float, offset: float, segments: int) -> list[np.ndarray]:
    r = half * _UTURN_RADIUS_RATIO + offset
    if r < _MIN_RADIUS:
        return []
    t = np.arange(segments + 1, dtype=np.float64) / segments
    angle = math.pi - t * math.pi
    return [np.stack([np.cos(angle) * r, -half + np.sin(angle) * r], axis=1)]


def tile_shapes(
    pattern: str,
    half: float,
    offset: float,
    segments: int,
    corner_style: str = "rounded",
) -> list[np.ndarray]:
    """タイル中心原点・無回転でのパターン点列を返す。未知の pattern は "arcs"。"""
    seg = max(1, int(segments))
    if pattern == "lines":
        return _line_shapes(half, offset)
    if pattern == "scurve":
        return _scurve_shapes(half, offset, seg)
    if pattern == "uturn":
        return _uturn_shapes(half, offset, seg)
    return _arc_shapes(half, offset, seg, corner_style)


@generator
def truchet_tiles(
    ctx: ExecutionContext,
    *,
    columns: int = 8,
    rows: int = 6,
    tile_size: float = 20.0,
    center_x: float = 50.0,
    center_y: float = 50.0,
    tile_type: str = "arcs",
    line_count: int = 5,
    line_spacing: float = 1.5,
    segments: int = 16,
    random_rotation: bool = True,
    pattern_variety: float = 100.0,
    connect_edges: bool = False,
    corner_style: str = "rounded",
) -> list[Layer]:
    """columns x rows のタイルを敷き詰める。

    Parameters
    ----------
    tile_type : {"arcs", "lines", "mixed", "curves"}, default "arcs"
        "mixed" は arcs / lines を、"curves" は arcs / scurve / uturn をタイルごとに選ぶ。
    pattern_variety : float, default 100.0
        タイルごとに回転・パターンを引き直す確率 [%]。外れたタイルは基準値を使う。
    connect_edges : bool, default False
        回転を市松模様で 0/2 と 1/3 に揃え、隣接タイル間で線をつなげる。
    corner_style : {"rounded", "sharp"}, default "rounded"
        "arcs" を円弧で描くか、辺中点を結ぶ直線で描くか。

    Notes
    -----
    乱数は基準回転 1 回、基準パターン 1 回（mixed / curves のみ）を先に消費する。
    続いてタイルごとに、random_rotation なら 2 回、mixed / curves ならさらに 2 回消費する。
    基準値を採ったタイルでも同じ回数を消費する。
    """
    canvas = ctx.canvas
    rng = ctx.rng
    n_cols = max(0, int(columns))
    n_rows = max(0, int(rows))
    size = float(tile_size)
    half = size / 2.0
    variety = float(pattern_variety) / 100.0
    ox = canvas.pct_x(center_x) - n_cols * size / 2.0
    oy = canvas.pct_y(center_y) - n_rows * size / 2.0

    base_rotation = int(math.floor(rng() * 4.0))
    if tile_type == "curves":
        base_pattern = _CURVE_PATTERNS[int(math.floor(rng() * 3.0))]
    elif tile_type == "mixed":
        base_pattern = "arcs" if rng() < 0.5 else "lines"
    else:
        base_pattern = tile_type

    rotations = np.zeros((n_rows, n_cols), dtype=np.int64)
    patterns: list[list[str]] = []
    for row in range(n_rows):
        row_patterns: list[str] = []
        for col in range(n_cols):
            if random_rotation:
                if rng() < variety:
                    rotations[row, col] = int(math.floor(rng() * 4.0))
                else:
                    rotations[row, col] = base_rotation
                    rng.skip(1)

            pattern = tile_type
            if tile_type == "mixed":
                if rng() < variety:
                    pattern = "arcs" if rng() < 0.5 else "lines"
                else:
                    pattern = base_pattern
                    rng.skip(1)
            elif tile_type == "curves":
                if rng() < variety:
                    r = rng()
                    pattern = "arcs" if r < 0.4 else ("scurve" if r < 0.7 else "uturn")
                else:
                    pattern = base_pattern
                    rng.skip(1)
            row_patterns.append(pattern)
        patterns.append(row_patterns)

    if connect_edges:
        checker = (np.add.outer(np.arange(n_rows), np.arange(n_cols)) % 2) * 2
        rotations = rotations % 2 + checker

    n_lines = max(1, int(line_count))
    offsets = [
        (i - (n_lines - 1) / 2.0) * float(line_spacing) if n_lines > 1 else 0.0
        for i in range(n_lines)
    ]

    paths: list[Path] = []
    for row in range(n_rows):
        for col in range(n_cols):
            matrix = _ROTATIONS[int(rotations[row, col]) % 4]
            center = np.array([ox + col * size + half, oy + row * size + half])
            for off in offsets:
                for local in tile_shapes(patterns[row][col], half, off, int(segments), corner_style):
                    paths.append(Path(local @ matrix + center, closed=False))

    return [Layer("truchet_tiles", tuple(paths))]
