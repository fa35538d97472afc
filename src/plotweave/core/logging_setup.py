"""
どこで: `src/plotweave/core/logging_setup.py`。
何を: CLI 実行時に `plotweave` パッケージロガーへ stderr 出力のハンドラを 1 つだけ付ける。
なぜ: ルートロガーや利用側アプリの設定を触らずに、パイプラインの警告（スキップした step など）を見せるため。
"""

from __future__ import annotations

import logging
from typing import TextIO

PACKAGE_LOGGER = "plotweave"
CLI_HANDLER_NAME = "plotweave-cli"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    if not isinstance(lvl, int):
        raise ValueError(f"未知のログレベルです: {level!r}")
    return lvl


def setup_default_logging(level: int | str = "WARNING", *, stream: TextIO | None = None) -> logging.Logger:
    """`plotweave` ロガーのレベルを設定し、CLI 用ハンドラを冪等に付ける。

    Parameters
    ----------
    level : int | str
        ログレベル（"DEBUG" などの名前も可）。
    stream : TextIO | None
        出力先。None なら sys.stderr。2 回目以降の呼び出しではレベルだけを更新する。

    Returns
    -------
    logging.Logger
        設定した `plotweave` ロガー。propagate は変えない。

    Raises
    ------
    ValueError
        レベル名が未知の場合。
    """
    lvl = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(lvl)
    for h in logger.handlers:
        if h.get_name() == CLI_HANDLER_NAME:
            h.setLevel(lvl)
            return logger

    handler = logging.StreamHandler(stream)
    handler.set_name(CLI_HANDLER_NAME)
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["CLI_HANDLER_NAME", "PACKAGE_LOGGER", "setup_default_logging"]
