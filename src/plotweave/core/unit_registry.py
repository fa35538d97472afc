# src/plotweave/core/unit_registry.py
# generator / modifier を 1 つの unit 表現で登録するレジストリ。
# unit 名から UnitSpec を引き、execute(params, input_layers, ctx) で実行できるようにする。

from __future__ import annotations

import inspect
from collections.abc import ItemsView, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable

from plotweave.core.algorithms.stamp import STAMP_DEFAULTS, stamp_settings
from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import FALLOFF_DEFAULTS, falloff_params
from plotweave.core.model import Layer

UNIT_KINDS: tuple[str, ...] = ("generator", "modifier")

# デコレータが注入する予約キーワード。対応フラグが有効な場合のみ defaults から外す。
_RESERVED_KWARGS: tuple[str, ...] = ("falloff", "stamp")


@dataclass(frozen=True, slots=True)
class InputSlot:
    """unit が受け付ける補助入力スロット。"""

    name: str
    optional: bool = True


@dataclass(frozen=True, slots=True)
class UnitSpec:
    """登録済み unit の実行仕様。

    Attributes
    ----------
    name : str
        unit 名（関数名）。
    kind : str
        "generator" または "modifier"。
    func : Callable
        ユーザー定義関数。generator は ``f(ctx, **params)``、
        modifier は ``f(layers, ctx, **params)`` を想定する。
    defaults : Mapping[str, Any]
        受け付ける全引数とその既定値（falloff / stamp 用のキーを含む）。
    inputs : tuple[InputSlot, ...]
        補助入力スロット。
    uses_falloff, uses_stamp : bool
        True なら対応するキー群を `FalloffParams` / `StampSettings` にまとめて渡す。
    """

    name: str
    kind: str
    func: Callable[..., Any]
    defaults: Mapping[str, Any] = field(default_factory=dict)
    inputs: tuple[InputSlot, ...] = ()
    uses_falloff: bool = False
    uses_stamp: bool = False

    @property
    def is_generator(self) -> bool:
        return self.kind == "generator"

    def resolve_params(self, params: Mapping[str, Any] | None) -> dict[str, Any]:
        """既定値の上に params を重ねた完全な引数辞書を返す。

        Raises
        ------
        TypeError
            未知の引数名が含まれる場合。
        """
        given = {} if params is None else dict(params)
        unknown = sorted(k for k in given if k not in self.defaults)
        if unknown:
            raise TypeError(f"unit '{self.name}' に未知の引数が渡された: {unknown}")
        merged = dict(self.defaults)
        merged.update(given)
        return merged

    def execute(
        self,
        params: Mapping[str, Any] | None,
        input_layers: Sequence[Layer],
        ctx: ExecutionContext,
    ) -> list[Layer]:
        """unit を実行し、出力 Layer 列を返す。

        generator は input_layers を無視する。乱数は ctx.rng 経由でのみ消費する。
        """
        kwargs = self.resolve_params(params)
        if self.uses_falloff:
            fo = falloff_params(kwargs)
            for k in FALLOFF_DEFAULTS:
                kwargs.pop(k, None)
            kwargs["falloff"] = fo
        if self.uses_stamp:
            st = stamp_settings(kwargs)
            for k in STAMP_DEFAULTS:
                kwargs.pop(k, None)
            kwargs["stamp"] = st

        if self.is_generator:
            out = self.func(ctx, **kwargs)
        else:
            out = self.func(tuple(input_layers), ctx, **kwargs)
        return _normalize_output(out, context=f"unit '{self.name}'")


def _normalize_output(out: Any, *, context: str) -> list[Layer]:
    if isinstance(out, Layer):
        return [out]
    try:
        layers = list(out)
    except TypeError as exc:
        raise TypeError(f"{context} の戻り値は Layer 列である必要がある: {type(out)!r}") from exc
    for layer in layers:
        if not isinstance(layer, Layer):
            raise TypeError(f"{context} の戻り値に Layer 以外が含まれる: {type(layer)!r}")
    return layers


class UnitRegistry:
    """unit 名と UnitSpec を対応付けるレジストリ。

    Notes
    -----
    generator と modifier を同じ辞書で管理し、`UnitSpec.kind` で区別する。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, UnitSpec] = {}

    def _register(self, spec: UnitSpec, *, overwrite: bool = True) -> None:
        """unit を登録する（内部用）。

        Notes
        -----
        登録は `@generator` / `@modifier` デコレータ経由に統一する。
        """
        if not overwrite and spec.name in self._items:
            raise ValueError(f"unit '{spec.name}' は既に登録されている")
        self._items[spec.name] = spec

    def get(self, name: str) -> UnitSpec:
        """unit 名に対応する UnitSpec を取得する。

        Raises
        ------
        KeyError
            未登録の unit 名が指定された場合。
        """
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> UnitSpec:
        return self.get(name)

    def items(self) -> ItemsView[str, UnitSpec]:
        """登録済みエントリの (name, spec) ビューを返す。"""
        return self._items.items()

    def generators(self) -> list[str]:
        return sorted(n for n, s in self._items.items() if s.kind == "generator")

    def modifiers(self) -> list[str]:
        return sorted(n for n, s in self._items.items() if s.kind == "modifier")

    def get_defaults(self, name: str) -> dict[str, Any]:
        """unit 名に対応するデフォルト引数辞書を取得する。"""
        return dict(self.get(name).defaults)


unit_registry = UnitRegistry()
"""グローバルな unit レジストリインスタンス。"""


def _defaults_from_signature(
    f: Callable[..., Any], *, skip_positional: int, reserved: tuple[str, ...] = ()
) -> dict[str, Any]:
    sig = inspect.signature(f)
    params = list(sig.parameters.values())
    positional = [
        p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if len(positional) != skip_positional:
        raise ValueError(
            f"unit '{f.__name__}' の位置引数は {skip_positional} 個である必要がある"
            f": got={[p.name for p in positional]}"
        )
    defaults: dict[str, Any] = {}
    for p in params:
        if p.kind != p.KEYWORD_ONLY or p.name in reserved:
            continue
        if p.default is inspect.Parameter.empty:
            raise ValueError(f"unit '{f.__name__}' の引数は default 必須: {p.name!r}")
        defaults[p.name] = p.default
    return defaults


def _normalize_slots(inputs: Iterable[str | InputSlot], *, stamp: bool) -> tuple[InputSlot, ...]:
    slots: list[InputSlot] = []
    for item in inputs:
        slot = item if isinstance(item, InputSlot) else InputSlot(str(item))
        slots.append(slot)
    if stamp and not any(s.name == "stamp" for s in slots):
        slots.append(InputSlot("stamp", optional=True))
    return tuple(slots)


def _unit_decorator(
    kind: str,
    func: Callable[..., Any] | None,
    *,
    name: str | None,
    falloff: bool,
    stamp: bool,
    inputs: Iterable[str | InputSlot],
    overwrite: bool,
):
    if kind not in UNIT_KINDS:
        raise ValueError(f"未知の unit kind: {kind!r}")

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        skip = 1 if kind == "generator" else 2
        reserved = tuple(
            k for k, on in zip(_RESERVED_KWARGS, (falloff, stamp)) if on
        )
        defaults = _defaults_from_signature(f, skip_positional=skip, reserved=reserved)
        sig = inspect.signature(f)
        if falloff:
            if "falloff" not in sig.parameters:
                raise ValueError(f"unit '{f.__name__}' は falloff 引数を持つ必要がある")
            defaults.update(FALLOFF_DEFAULTS)
        if stamp:
            if "stamp" not in sig.parameters:
                raise ValueError(f"unit '{f.__name__}' は stamp 引数を持つ必要がある")
            defaults.update(STAMP_DEFAULTS)
        spec = UnitSpec(
            name=name or f.__name__,
            kind=kind,
            func=f,
            defaults=defaults,
            inputs=_normalize_slots(inputs, stamp=stamp),
            uses_falloff=bool(falloff),
            uses_stamp=bool(stamp),
        )
        unit_registry._register(spec, overwrite=overwrite)
        return f

    if func is None:
        return decorator
    return decorator(func)


def generator(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    stamp: bool = False,
    inputs: Iterable[str | InputSlot] = (),
    overwrite: bool = True,
):
    """generator 用デコレータ。関数名をそのまま unit 名として登録する。

    Examples
    --------
    @generator
    def concentric_circles(ctx, *, count=5, min_radius=10.0, ...):
        ...
        return [Layer("concentric", paths)]
    """
    return _unit_decorator(
        "generator",
        func,
        name=name,
        falloff=False,
        stamp=stamp,
        inputs=inputs,
        overwrite=overwrite,
    )


def modifier(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    falloff: bool = False,
    inputs: Iterable[str | InputSlot] = (),
    overwrite: bool = True,
):
    """modifier 用デコレータ。

    `falloff=True` の場合、`enable_falloff` などのキーを受け付け、
    関数には `falloff: FalloffParams` として渡す。
    """
    return _unit_decorator(
        "modifier",
        func,
        name=name,
        falloff=falloff,
        stamp=False,
        inputs=inputs,
        overwrite=overwrite,
    )


__all__ = [
    "InputSlot",
    "UNIT_KINDS",
    "UnitRegistry",
    "UnitSpec",
    "generator",
    "modifier",
    "unit_registry",
]
