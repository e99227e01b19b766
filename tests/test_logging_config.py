from __future__ import annotations

import logging
from pathlib import Path

import pytest

from xplat_bans.logging_config import ColoredFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_handlers():
    yield
    logger = logging.getLogger("xplat_bans")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def test_colored_formatter_restores_level_name() -> None:
    record = logging.LogRecord("xplat_bans.test", logging.WARNING, __file__, 1, "careful", None, None)

    text = ColoredFormatter("%(levelname)s - %(message)s", use_colors=True).format(record)

    assert text == "\033[33mWARNING\033[0m - careful"
    assert record.levelname == "WARNING"


def test_plain_formatter_output() -> None:
    record = logging.LogRecord("xplat_bans.test", logging.ERROR, __file__, 1, "boom", None, None)
    assert ColoredFormatter("%(levelname)s - %(message)s", use_colors=False).format(record) == "ERROR - boom"


def test_setup_logging_writes_debug_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"

    logger = setup_logging(level="WARNING", log_file=str(log_file), use_colors=False)
    get_logger("analyzer").debug("only in the file")
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == "xplat_bans"
    assert len(logger.handlers) == 2
    assert "only in the file" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_previous_handlers() -> None:
    setup_logging(level="INFO", use_colors=False)
    logger = setup_logging(level="ERROR", use_colors=False)

    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.ERROR
