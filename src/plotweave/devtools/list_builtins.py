"""
どこで: `src/plotweave/devtools/list_builtins.py`。
何を: 組み込み unit の名前を種別ごとに表示する。`--verbose` では入力スロットと既定パラメータも出す。
なぜ: パイプライン YAML を書くときに、unit 名とパラメータ名をコードを読まずに確かめられるようにするため。
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable

from plotweave.core.builtins import ensure_builtin_units_registered
from plotweave.core.unit_registry import UnitSpec, unit_registry

_SECTIONS: dict[str, str] = {"generators": "generator", "modifiers": "modifier"}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m plotweave list")
    p.add_argument(
        "target",
        nargs="?",
        default="all",
        choices=("generators", "modifiers", "all"),
        help="一覧対象（省略時: all）",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="入力スロット・フォールオフ対応・既定パラメータも表示する",
    )
    return p.parse_args(argv)


def _public_specs(kind: str) -> list[UnitSpec]:
    return [
        spec
        for name, spec in sorted(unit_registry.items())
        if spec.kind == kind and not name.startswith("_")
    ]


def describe_unit(spec: UnitSpec) -> list[str]:
    """1 unit 分の詳細行。1 行目が名前と属性、以降が `param = default`。"""
    tags: list[str] = []
    if spec.uses_stamp:
        tags.append("stamp")
    if spec.uses_falloff:
        tags.append("falloff")
    for slot in spec.inputs:
        tags.append(f"input:{slot.name}{'?' if slot.optional else ''}")
    head = spec.name if not tags else f"{spec.name}  [{', '.join(tags)}]"
    lines = [head]
    for key, value in spec.defaults.items():
        lines.append(f"    {key} = {value!r}")
    return lines


def _section_lines(kind: str, *, verbose: bool) -> Iterable[str]:
    for spec in _public_specs(kind):
        if verbose:
            yield from describe_unit(spec)
        else:
            yield spec.name


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    ensure_builtin_units_registered()

    if args.target in _SECTIONS:
        for line in _section_lines(_SECTIONS[args.target], verbose=args.verbose):
            print(line)
        return 0

    blocks = []
    for title, kind in _SECTIONS.items():
        blocks.append("\n".join([f"{title}:", *_section_lines(kind, verbose=args.verbose)]))
    print("\n\n".join(blocks))
    return 0
