"""Tests for logging configuration."""

import logging

from utilities.app_logging import LOGGER_NAMES, configure_logging


def test_configure_logging_idempotent() -> None:
    for name in LOGGER_NAMES:
        logging.getLogger(name).handlers.clear()

    configure_logging()
    configure_logging()

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        assert len(logger.handlers) == 1
        assert logger.propagate is False
