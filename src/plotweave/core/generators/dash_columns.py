"""
どこで: `src/plotweave/core/generators/dash_columns.py`。
何を: 列ごとに「ダッシュの塊 / 空白」を乱数の高さで交互に積み、塊を水平ダッシュで埋める。
なぜ: パイプラインのシードとは独立に、パラメータの seed だけで柄を固定できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from plotweave.core.context import ExecutionContext
from plotweave.core.geometry import line_path
from plotweave.core.model import Layer, Path
from plotweave.core.rng import SeededRandom
from plotweave.core.unit_registry import generator

OUTPUT_MODES: tuple[str, ...] = ("all-one-layer", "column-per-layer", "block-per-layer")

# 塊から始まる確率は 0.7。
_FILLED_START_THRESHOLD = 0.3
# 太さ方向の線間隔はダッシュ間隔に対する比で決める。
_THICKNESS_RATIO = 0.4


@dataclass(frozen=True, slots=True)
class _Block:
    column: int
    y: float
    height: float


def _column_blocks(
    rng: SeededRandom,
    column: int,
    total_height: float,
    dash_spacing: float,
    block_range: tuple[float, float],
    gap_range: tuple[float, float],
) -> list[_Block]:
    blocks: list[_Block] = []
    y = 0.0
    filled = rng() > _FILLED_START_THRESHOLD
    while y < total_height:
        if filled:
            lo, hi = block_range
            h = min(lo + rng() * (hi - lo), total_height - y)
            if h > dash_spacing:
                blocks.append(_Block(column, y, h))
            y += h
        else:
            lo, hi = gap_range
            y += lo + rng() * (hi - lo)
        filled = not filled
    return blocks


@generator
def dash_columns(
    ctx: ExecutionContext,
    *,
    columns: int = 10,
    column_width: float = 10.0,
    column_gap: float = 2.0,
    total_height: float = 150.0,
    dash_length: float = 8.0,
    dash_spacing: float = 1.0,
    dash_thickness: int = 1,
    min_block_height: float = 10.0,
    max_block_height: float = 40.0,
    min_gap_height: float = 5.0,
    max_gap_height: float = 20.0,
    seed: int = 12345,
    output_mode: str = "all-one-layer",
    center_x: float = 50.0,
    center_y: float = 50.0,
) -> list[Layer]:
    """ダッシュの塊を縦に並べた列を生成する。

    Parameters
    ----------
    dash_thickness : int, default 1
        1 ダッシュを構成する平行線の本数。線間隔は `dash_spacing * 0.4`。
    seed : int, default 12345
        塊の配置に使う専用シード。ctx.rng は消費しない。
    output_mode : {"all-one-layer", "column-per-layer", "block-per-layer"}
        "column-per-layer" は "dash_col_{列}"、"block-per-layer" は "dash_block_{通し番号}" の
        Layer に分ける（空の列 / 塊は出力しない）。全て空なら空の "dash_columns" を返す。

    Notes
    -----
    高さ min(乱数高さ, 残り高さ) の塊のうち、dash_spacing 以下のものは捨てる（y は進める）。
    ダッシュ中心線は塊上端 + dash_spacing / 2 から始め、
    `dash_spacing + (dash_thickness - 1) * 線間隔` ずつ下げる。
    """
    canvas = ctx.canvas
    rng = SeededRandom(int(seed))
    n_cols = max(0, int(columns))
    col_w = float(column_width)
    gap = float(column_gap)
    total_h = float(total_height)
    d_len = float(dash_length)
    d_sp = float(dash_spacing)
    thickness = max(1, int(dash_thickness))
    t_sp = d_sp * _THICKNESS_RATIO
    if d_sp <= 0.0:
        raise ValueError(f"dash_spacing は正である必要がある: {dash_spacing!r}")
    if float(max_block_height) <= 0.0 and float(max_gap_height) <= 0.0:
        raise ValueError("塊と空白の高さが両方 0 以下では列が埋まらない")
    step = d_sp + (thickness - 1) * t_sp

    pattern_w = n_cols * col_w + (n_cols - 1) * gap
    ox = canvas.pct_x(center_x) - pattern_w / 2.0
    oy = canvas.pct_y(center_y) - total_h / 2.0

    by_column = [
        _column_blocks(
            rng,
            col,
            total_h,
            d_sp,
            (float(min_block_height), float(max_block_height)),
            (float(min_gap_height), float(max_gap_height)),
        )
        for col in range(n_cols)
    ]

    def _dashes(block: _Block) -> list[Path]:
        x1 = ox + block.column * (col_w + gap) + (col_w - d_len) / 2.0
        x2 = x1 + d_len
        top = oy + block.y
        bottom = top + block.height
        out: list[Path] = []
        dy = top + d_sp / 2.0
        while dy < bottom:
            for t in range(thickness):
                y = dy + t * t_sp
                if y < bottom:
                    out.append(line_path(x1, y, x2, y))
            dy += step
        return out

    layers: list[Layer] = []
    if output_mode == "column-per-layer":
        for col, blocks in enumerate(by_column):
            paths = [p for b in blocks for p in _dashes(b)]
            if paths:
                layers.append(Layer(f"dash_col_{col}", tuple(paths)))
        return layers or [Layer("dash_columns")]

    if output_mode == "block-per-layer":
        for blocks in by_column:
            for b in blocks:
                paths = _dashes(b)
                if paths:
                    layers.append(Layer(f"dash_block_{len(layers)}", tuple(paths)))
        return layers or [Layer("dash_columns")]

    paths = [p for blocks in by_column for b in blocks for p in _dashes(b)]
    return [Layer("dash_columns", tuple(paths))]
