"""
Logging configuration shared by the parser and the editor.

Everything logs below the ``infographic`` logger namespace so a caller can
silence or redirect the whole project with one handler.
"""

import logging
import os
from typing import Optional


LOGGER_NAMESPACE = "infographic"
DEFAULT_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the ``infographic`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to ``INFOGRAPHIC_LOG_LEVEL`` and then ``WARNING``.
        log_file: Optional file path. When given, records go to that file
            instead of the console.
    """
    if level is None:
        level = os.environ.get("INFOGRAPHIC_LOG_LEVEL", DEFAULT_LEVEL)

    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        log_level = getattr(logging, DEFAULT_LEVEL)

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the project logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
