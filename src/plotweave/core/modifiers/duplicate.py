"""
どこで: `src/plotweave/core/modifiers/duplicate.py`。
何を: 入力 Layer のパスを配置モードに従って複製し、回転・スケールの補間と各種エフェクタを掛ける。
なぜ: 1 つのモチーフから列・格子・円環・ガイドパス沿いの繰り返しを作るため。

複製 i（0 始まり、全 N 個）の変換は次の順で決まる。

1. 配置モードが決める平行移動 (x, y) と向き（circular / along-path のみ）
2. `t = i / (N - 1)` をイージングした回転・スケールの補間
3. step エフェクタ（`(i + 1) % step_interval == 0` の複製に回転加算・スケール乗算）
4. noise エフェクタ（`noise2d(i * freq, 0, seed + 100..400)` による位置・回転・スケール）
5. random エフェクタ（共有乱数: 位置 2 回、回転 1 回、スケール 1 回。量が 0 の項目は消費しない）

点は変換中心 (center_x, center_y) [%] を原点として、スケール → 回転 → 戻し + 平行移動の順に写す。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from plotweave.core.context import ExecutionContext
from plotweave.core.easing import ease
from plotweave.core.geometry import noise2d, segment_lengths
from plotweave.core.model import Layer, Path
from plotweave.core.rng import SeededRandom
from plotweave.core.unit_registry import InputSlot, modifier

DISTRIBUTION_MODES: tuple[str, ...] = (
    "linear",
    "grid",
    "circular",
    "random",
    "radial",
    "along-path",
)
PATH_SPACINGS: tuple[str, ...] = ("even", "by-distance")

_FULL_CIRCLE_EPS = 0.01
_BY_DISTANCE_SLACK = 1e-3
_NOISE_SEED_OFFSETS: tuple[int, int, int, int] = (100, 200, 300, 400)


@dataclass(frozen=True, slots=True)
class CopyPlacement:
    """複製 1 つ分の平行移動と向き [rad]。"""

    x: float
    y: float
    orient: float = 0.0


def linear_placements(copies: int, offset_x: float, offset_y: float) -> list[CopyPlacement]:
    return [CopyPlacement(offset_x * i, offset_y * i) for i in range(1, max(0, int(copies)) + 1)]


def grid_placements(
    rows: int,
    cols: int,
    spacing_x: float,
    spacing_y: float,
    centered: bool,
) -> list[CopyPlacement]:
    """行優先の格子。中央揃えで行・列とも奇数なら中央（元の位置）を飛ばす。"""
    n_rows = max(0, int(rows))
    n_cols = max(0, int(cols))
    ox = -((n_cols - 1) * spacing_x) / 2.0 if centered else 0.0
    oy = -((n_rows - 1) * spacing_y) / 2.0 if centered else 0.0
    skip_center = centered and n_rows % 2 == 1 and n_cols % 2 == 1
    out = []
    for r in range(n_rows):
        for c in range(n_cols):
            if skip_center and r == n_rows // 2 and c == n_cols // 2:
                continue
            out.append(CopyPlacement(ox + c * spacing_x, oy + r * spacing_y))
    return out


def circular_placements(
    count: int,
    radius: float,
    start_rad: float,
    end_rad: float,
    center_offset: tuple[float, float],
    orient: bool,
) -> list[CopyPlacement]:
    """円弧上に並べる。1 周ちょうどなら終点（= 始点）を含めない。

    平行移動はキャンバス中心からのずれ（center_offset）を足した値。
    向きは接線方向 `angle + π/2`。
    """
    n = max(0, int(count))
    span = end_rad - start_rad
    full = abs(span - 2.0 * math.pi) < _FULL_CIRCLE_EPS
    out = []
    for i in range(n):
        if full:
            t = i / n
        else:
            t = i / (n - 1) if n > 1 else 0.0
        angle = start_rad + span * t
        out.append(
            CopyPlacement(
                math.cos(angle) * radius + center_offset[0],
                math.sin(angle) * radius + center_offset[1],
                angle + math.pi / 2.0 if orient else 0.0,
            )
        )
    return out


def random_placements(
    count: int, spread_x: float, spread_y: float, seed: int
) -> list[CopyPlacement]:
    """専用シードの乱数で ±spread/2 の範囲に散らす（ctx.rng は消費しない）。"""
    rng = SeededRandom(int(seed))
    out = []
    for _ in range(max(0, int(count))):
        x = (rng() - 0.5) * spread_x
        y = (rng() - 0.5) * spread_y
        out.append(CopyPlacement(x, y))
    return out


def radial_placements(count: int, radius: float, angle_offset_rad: float) -> list[CopyPlacement]:
    n = max(0, int(count))
    out = []
    for i in range(n):
        angle = angle_offset_rad + (i / n) * math.pi * 2.0
        out.append(CopyPlacement(math.cos(angle) * radius, math.sin(angle) * radius))
    return out


def along_path_placements(
    guide: Path | None,
    *,
    copies: int,
    align: bool,
    start_pct: float,
    end_pct: float,
    spacing: str,
    spacing_distance: float,
    canvas_center: tuple[float, float],
) -> list[CopyPlacement]:
    """ガイドパス上の弧長位置に並べる。

    ガイドが無い・2 点未満・長さ 0 のときは原点に 1 つだけ置く。
    平行移動はキャンバス中心からの相対位置、向きは所属辺の方向。
    """
    if guide is None or len(guide) < 2:
        return [CopyPlacement(0.0, 0.0)]
    v = guide.coords
    cum = np.concatenate([[0.0], np.cumsum(segment_lengths(v))])
    total = float(cum[-1])
    if total == 0.0:
        return [CopyPlacement(0.0, 0.0)]

    start_d = start_pct / 100.0 * total
    end_d = end_pct / 100.0 * total
    targets: list[float] = []
    if spacing == "by-distance" and spacing_distance > 0.0:
        d = start_d
        while d <= end_d + _BY_DISTANCE_SLACK:
            targets.append(d)
            d += spacing_distance
    else:
        n = max(0, int(copies))
        for i in range(n):
            t = i / (n - 1) if n > 1 else 0.0
            targets.append(start_d + t * (end_d - start_d))

    last_seg = int(v.shape[0]) - 2
    out = []
    for target in targets:
        # target を含む最初の辺。終端を超えた値は最後の辺で外挿する。
        seg = min(int(np.searchsorted(cum[1:], target, side="left")), last_seg)
        seg_len = float(cum[seg + 1] - cum[seg])
        u = (target - float(cum[seg])) / seg_len if seg_len > 0.0 else 0.0
        p1 = v[seg]
        p2 = v[seg + 1]
        x = float(p1[0] + (p2[0] - p1[0]) * u)
        y = float(p1[1] + (p2[1] - p1[1]) * u)
        angle = math.atan2(float(p2[1] - p1[1]), float(p2[0] - p1[0])) if align else 0.0
        out.append(CopyPlacement(x - canvas_center[0], y - canvas_center[1], angle))
    return out


def _transform(
    coords: np.ndarray,
    center: np.ndarray,
    sx: float,
    sy: float,
    rotation: float,
    offset: np.ndarray,
) -> np.ndarray:
    v = (coords - center) * np.array([sx, sy], dtype=np.float64)
    if rotation != 0.0:
        c = math.cos(rotation)
        s = math.sin(rotation)
        v = np.stack([v[:, 0] * c - v[:, 1] * s, v[:, 0] * s + v[:, 1] * c], axis=1)
    return v + center + offset


@modifier(inputs=(InputSlot("guide_path", optional=True),))
def duplicate(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    distribution_mode: str = "linear",
    copies: int = 3,
    offset_x: float = 20.0,
    offset_y: float = 20.0,
    grid_rows: int = 3,
    grid_columns: int = 3,
    grid_spacing_x: float = 20.0,
    grid_spacing_y: float = 20.0,
    grid_centered: bool = True,
    circle_radius: float = 100.0,
    circle_count: int = 8,
    circle_start_angle: float = 0.0,
    circle_end_angle: float = 360.0,
    circle_center_x: float = 50.0,
    circle_center_y: float = 50.0,
    orient_to_circle: bool = True,
    path_copies: int = 10,
    align_to_path: bool = True,
    path_start_offset: float = 0.0,
    path_end_offset: float = 100.0,
    path_spacing: str = "even",
    path_spacing_distance: float = 20.0,
    random_copies: int = 5,
    random_spread_x: float = 50.0,
    random_spread_y: float = 50.0,
    random_seed: int = 12345,
    radial_count: int = 6,
    radial_radius: float = 30.0,
    radial_angle_offset: float = 0.0,
    rotation_start: float = 0.0,
    rotation_end: float = 0.0,
    rotation_easing: str = "linear",
    uniform_scale: bool = True,
    scale_start: float = 1.0,
    scale_end: float = 1.0,
    scale_x_start: float = 1.0,
    scale_x_end: float = 1.0,
    scale_y_start: float = 1.0,
    scale_y_end: float = 1.0,
    scale_easing: str = "linear",
    center_x: float = 50.0,
    center_y: float = 50.0,
    randomize_position: float = 0.0,
    randomize_rotation: float = 0.0,
    randomize_scale: float = 0.0,
    enable_step_effector: bool = False,
    step_interval: int = 2,
    step_rotation: float = 0.0,
    step_scale: float = 1.0,
    enable_noise_effector: bool = False,
    noise_position_amount: float = 0.0,
    noise_rotation_amount: float = 0.0,
    noise_scale_amount: float = 0.0,
    noise_frequency: float = 0.1,
    include_original: bool = True,
) -> list[Layer]:
    """各 Layer のパスを複製して同じ Layer に追加する。

    Parameters
    ----------
    distribution_mode : {"linear", "grid", "circular", "random", "radial", "along-path"}
        複製の配置。未知の値では複製を作らない。
    circle_start_angle, circle_end_angle, radial_angle_offset : float
        角度 [deg]。
    path_spacing : {"even", "by-distance"}, default "even"
        along-path の間隔。ガイドは補助入力 "guide_path" の最初のパス。
    rotation_start, rotation_end, step_rotation, randomize_rotation, noise_rotation_amount
        角度 [deg]。
    rotation_easing, scale_easing : str
        補間のイージング（"linear" / "ease-in" / "ease-out" / "ease-in-out"）。
    include_original : bool, default True
        True なら元パスを先頭に残す。

    Returns
    -------
    list[Layer]
        入力と同じ id の Layer 列。パスは「元パス → 複製 0 → 複製 1 …」の順。
    """
    canvas = ctx.canvas
    w = float(canvas.width)
    h = float(canvas.height)
    mode = str(distribution_mode)

    if mode == "linear":
        placements = linear_placements(copies, float(offset_x), float(offset_y))
    elif mode == "grid":
        placements = grid_placements(
            grid_rows,
            grid_columns,
            float(grid_spacing_x),
            float(grid_spacing_y),
            bool(grid_centered),
        )
    elif mode == "circular":
        placements = circular_placements(
            circle_count,
            float(circle_radius),
            math.radians(float(circle_start_angle)),
            math.radians(float(circle_end_angle)),
            (canvas.pct_x(circle_center_x) - w / 2.0, canvas.pct_y(circle_center_y) - h / 2.0),
            bool(orient_to_circle),
        )
    elif mode == "random":
        placements = random_placements(
            random_copies, float(random_spread_x), float(random_spread_y), int(random_seed)
        )
    elif mode == "radial":
        placements = radial_placements(
            radial_count, float(radial_radius), math.radians(float(radial_angle_offset))
        )
    elif mode == "along-path":
        guide_layers = ctx.input_layers("guide_path")
        guide = guide_layers[0].paths[0] if guide_layers and guide_layers[0].paths else None
        placements = along_path_placements(
            guide,
            copies=path_copies,
            align=bool(align_to_path),
            start_pct=float(path_start_offset),
            end_pct=float(path_end_offset),
            spacing=str(path_spacing),
            spacing_distance=float(path_spacing_distance),
            canvas_center=(w / 2.0, h / 2.0),
        )
    else:
        placements = []

    use_orient = (mode == "circular" and orient_to_circle) or (
        mode == "along-path" and align_to_path
    )
    rot_start = math.radians(float(rotation_start))
    rot_end = math.radians(float(rotation_end))
    interval = max(1, int(step_interval))
    step_rad = math.radians(float(step_rotation))
    rand_pos = float(randomize_position)
    rand_rot = math.radians(float(randomize_rotation))
    rand_scale = float(randomize_scale)
    noise_rot = math.radians(float(noise_rotation_amount))
    center = np.array([canvas.pct_x(center_x), canvas.pct_y(center_y)], dtype=np.float64)
    total = len(placements)
    rng = ctx.rng

    # rng を消費しない部分（補間・step・noise）は複製ごとに先に求めておく。
    base: list[tuple[float, float, float, float, float]] = []
    for i, pl in enumerate(placements):
        t = i / (total - 1) if total > 1 else 0.0
        rotation = rot_start + (rot_end - rot_start) * ease(rotation_easing, t)
        if use_orient:
            rotation += pl.orient
        st = ease(scale_easing, t)
        if uniform_scale:
            sx = sy = float(scale_start) + (float(scale_end) - float(scale_start)) * st
        else:
            sx = float(scale_x_start) + (float(scale_x_end) - float(scale_x_start)) * st
            sy = float(scale_y_start) + (float(scale_y_end) - float(scale_y_start)) * st
        if enable_step_effector and (i + 1) % interval == 0:
            rotation += step_rad
            sx *= float(step_scale)
            sy *= float(step_scale)
        ox, oy = pl.x, pl.y
        if enable_noise_effector:
            q = i * float(noise_frequency)
            n_px, n_py, n_rot, n_sc = (
                noise2d(q, 0.0, ctx.seed + off) * 2.0 - 1.0 for off in _NOISE_SEED_OFFSETS
            )
            ox += n_px * float(noise_position_amount)
            oy += n_py * float(noise_position_amount)
            rotation += n_rot * noise_rot
            k = 1.0 + n_sc * float(noise_scale_amount)
            sx *= k
            sy *= k
        base.append((rotation, sx, sy, ox, oy))

    out: list[Layer] = []
    for layer in layers:
        paths: list[Path] = list(layer.paths) if include_original else []
        for rotation, sx, sy, ox, oy in base:
            if rand_pos > 0.0:
                ox += (rng() * 2.0 - 1.0) * rand_pos
                oy += (rng() * 2.0 - 1.0) * rand_pos
            if rand_rot > 0.0:
                rotation += (rng() * 2.0 - 1.0) * rand_rot
            if rand_scale > 0.0:
                k = 1.0 + (rng() * 2.0 - 1.0) * rand_scale
                sx *= k
                sy *= k
            offset = np.array([ox, oy], dtype=np.float64)
            for path in layer.paths:
                if len(path) == 0:
                    paths.append(path)
                    continue
                paths.append(
                    path.with_coords(_transform(path.coords, center, sx, sy, rotation, offset))
                )
        out.append(layer.with_paths(paths))
    return out
