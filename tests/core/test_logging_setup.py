"""core.logging_setup のハンドラ付与とレベル設定をテスト。"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest

from plotweave.core.logging_setup import CLI_HANDLER_NAME, setup_default_logging


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    logger = logging.getLogger("plotweave")
    saved = list(logger.handlers)
    level = logger.level
    for h in saved:
        logger.removeHandler(h)
    try:
        yield
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        for h in saved:
            logger.addHandler(h)
        logger.setLevel(level)


def _cli_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger("plotweave").handlers if h.get_name() == CLI_HANDLER_NAME]


def test_handler_is_attached_once_and_level_updates() -> None:
    setup_default_logging("WARNING")
    logger = setup_default_logging("debug")
    assert len(_cli_handlers()) == 1
    assert logger.level == logging.DEBUG
    assert _cli_handlers()[0].level == logging.DEBUG


def test_messages_from_submodules_reach_stream() -> None:
    buf = io.StringIO()
    setup_default_logging(logging.INFO, stream=buf)
    logging.getLogger("plotweave.core.pipeline").info("hello %d", 3)
    logging.getLogger("plotweave.core.pipeline").debug("hidden")
    assert buf.getvalue() == "INFO plotweave.core.pipeline: hello 3\n"


def test_root_logger_is_untouched() -> None:
    root_handlers = list(logging.getLogger().handlers)
    setup_default_logging("INFO", stream=io.StringIO())
    assert logging.getLogger().handlers == root_handlers


def test_unknown_level_raises() -> None:
    with pytest.raises(ValueError):
        setup_default_logging("LOUD")
