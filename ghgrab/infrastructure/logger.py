"""
Package-wide logger for GHGrab.
"""

import logging
import sys


LOGGER_NAME = "GHGrab"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Create (or fetch) the named logger with a single stderr handler.

    Calling it again only updates the level, so importing modules never
    stack duplicate handlers.
    """
    _logger = logging.getLogger(name)

    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)

    _logger.setLevel(level)
    return _logger


logger = setup_logger()


__all__ = [
    "LOGGER_NAME",
    "setup_logger",
    "logger",
]
