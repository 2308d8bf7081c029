from __future__ import annotations

import logging

from utils import setup_logger


def test_setup_logger_attaches_single_handler() -> None:
    logger = setup_logger("shortcut_sync.test_plain", level=logging.DEBUG, use_rich=False)
    again = setup_logger("shortcut_sync.test_plain", level=logging.DEBUG, use_rich=False)

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
