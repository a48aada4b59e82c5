"""
utils/logger.py
---------------
Logging setup for the data access layer.
Modules call `get_logger(__name__)`; the first call configures the root
logger unless the host application has already attached its own handlers.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Attach a stdout handler to the root logger and set its level.

    Does nothing after the first call, or when the root logger already has
    handlers (the caller owns logging in that case).

    Args:
        level: Level name such as "INFO" or "DEBUG"; unknown names mean INFO.
    """
    global _configured
    if _configured:
        return
    _configured = True
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Named logger for a module, configuring logging on first use."""
    configure_logging()
    return logging.getLogger(name)
