"""Logging configuration helpers."""

import logging

LOGGER_NAMES = ("main", "engine")


def configure_logging() -> None:
    """Configure application logging with a single stream handler per logger."""
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(logging.INFO)
        if logger.handlers:
            continue
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
