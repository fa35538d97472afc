"""
どこで: `src/plotweave/core/builtins.py`。
何を: 組み込み generator / modifier の登録（registry 初期化）を単一入口へ集約する。
なぜ: import 副作用の分散と手動列挙の重複をなくすため。
"""

from __future__ import annotations

import importlib

_BUILTIN_GENERATOR_MODULES: tuple[str, ...] = (
    "plotweave.core.generators.arc",
    "plotweave.core.generators.circle_pack",
    "plotweave.core.generators.concentric_circles",
    "plotweave.core.generators.contours",
    "plotweave.core.generators.cross_grid",
    "plotweave.core.generators.dash_columns",
    "plotweave.core.generators.flow_field",
    "plotweave.core.generators.grid",
    "plotweave.core.generators.horizontal_lines",
    "plotweave.core.generators.lissajous",
    "plotweave.core.generators.particle_spray",
    "plotweave.core.generators.radial_lines",
    "plotweave.core.generators.scatter_points",
    "plotweave.core.generators.spiral",
    "plotweave.core.generators.truchet_tiles",
    "plotweave.core.generators.vertical_lines",
    "plotweave.core.generators.voronoi",
)

_BUILTIN_MODIFIER_MODULES: tuple[str, ...] = (
    "plotweave.core.modifiers.attractor",
    "plotweave.core.modifiers.clip_circle",
    "plotweave.core.modifiers.clip_rect",
    "plotweave.core.modifiers.dash",
    "plotweave.core.modifiers.duplicate",
    "plotweave.core.modifiers.extend_endpoints",
    "plotweave.core.modifiers.jitter",
    "plotweave.core.modifiers.noise_displace",
    "plotweave.core.modifiers.randomize",
    "plotweave.core.modifiers.rotate",
    "plotweave.core.modifiers.scale",
    "plotweave.core.modifiers.smooth",
    "plotweave.core.modifiers.subdivide",
    "plotweave.core.modifiers.twist",
    "plotweave.core.modifiers.wave_displace",
)

_BUILTIN_GENERATORS_REGISTERED = False
_BUILTIN_MODIFIERS_REGISTERED = False


def ensure_builtin_generators_registered() -> None:
    """組み込み generator を registry に登録する（idempotent）。"""

    global _BUILTIN_GENERATORS_REGISTERED
    if _BUILTIN_GENERATORS_REGISTERED:
        return
    for module in _BUILTIN_GENERATOR_MODULES:
        importlib.import_module(module)
    _BUILTIN_GENERATORS_REGISTERED = True


def ensure_builtin_modifiers_registered() -> None:
    """組み込み modifier を registry に登録する（idempotent）。"""

    global _BUILTIN_MODIFIERS_REGISTERED
    if _BUILTIN_MODIFIERS_REGISTERED:
        return
    for module in _BUILTIN_MODIFIER_MODULES:
        importlib.import_module(module)
    _BUILTIN_MODIFIERS_REGISTERED = True


def ensure_builtin_units_registered() -> None:
    """組み込み generator / modifier をまとめて登録する（idempotent）。"""

    ensure_builtin_generators_registered()
    ensure_builtin_modifiers_registered()


__all__ = [
    "ensure_builtin_generators_registered",
    "ensure_builtin_modifiers_registered",
    "ensure_builtin_units_registered",
]
