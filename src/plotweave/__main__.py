# どこで: `src/plotweave/__main__.py`。
# 何を: `python -m plotweave ...` の CLI エントリポイントを提供する。
# なぜ: unit の一覧とパイプライン実行を短い導線で行えるようにするため。

from __future__ import annotations

import argparse
import sys


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="python -m plotweave")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser(
        "list",
        help="組み込み generator / modifier を一覧表示する",
        add_help=False,
    )
    sub.add_parser(
        "run",
        help="パイプライン定義 YAML を実行して統計を表示する",
        add_help=False,
    )

    args, rest = p.parse_known_args(argv)
    sub_argv = list(rest)
    if sub_argv and sub_argv[0] == "--":
        sub_argv = sub_argv[1:]

    if args.cmd == "list":
        from plotweave.devtools import list_builtins

        return int(list_builtins.main(sub_argv))

    if args.cmd == "run":
        from plotweave.devtools import run_pipeline

        return int(run_pipeline.main(sub_argv))

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
