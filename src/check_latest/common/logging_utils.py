"""Logging helpers shared across the package.

Modules log through ``logging.getLogger(__name__)``; these helpers keep the
structured ``extra=`` fields and URL redaction consistent between them.
"""
from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional, Union

from ..constants import Constants

PACKAGE_LOGGER = "check_latest"

_HANDLER_MARKER = "_check_latest_handler"


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Level name or number. Falls back to the CHECK_LATEST_LOG_LEVEL
            environment variable, then to WARNING.

    Returns:
        logging.Logger: The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if level is None:
        level = os.environ.get(Constants.ENV_LOG_LEVEL, Constants.DEFAULT_LOG_LEVEL)
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), None)
        if not isinstance(level, int):
            level = getattr(logging, Constants.DEFAULT_LOG_LEVEL)
    logger.setLevel(level)

    if not any(getattr(h, _HANDLER_MARKER, False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
    return logger


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for a log call, dropping unset fields."""
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip userinfo, query and fragment so URLs are safe to log."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return "<unparseable url>"
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, host, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
