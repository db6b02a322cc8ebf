"""
app/core/logger.py

Centralised logging configuration shared by the relay and the widget.
Every module should obtain its logger via:

    from app.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from app.core.config import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that drown out request-level output at INFO.
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "watchdog")


def _level() -> int:
    return logging.DEBUG if settings.debug else logging.INFO


def _build_handler() -> logging.StreamHandler:
    """Return a stdout handler using the pipe-separated format."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_level())
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    return handler


def _configure_root_logger() -> None:
    """Configure the root logger once at import time."""
    root = logging.getLogger()
    if root.handlers:
        # Already configured (uvicorn, streamlit or pytest got there first).
        return

    root.setLevel(_level())
    root.addHandler(_build_handler())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger.

    Usage
    -----
    >>> logger = get_logger(__name__)
    >>> logger.info("Relay started")
    """
    return logging.getLogger(name)
