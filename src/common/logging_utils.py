"""Centralized logging helpers.

Provides a single configure_logging() entry point plus small utilities used
throughout the code base for structured DEBUG traces:

- extra_context(): build the ``extra=`` payload for structured log records
- is_debug_enabled(): cheap guard before building expensive debug payloads
- Timer: context manager measuring elapsed wall time in milliseconds
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

# Attributes present on every LogRecord; anything else came in through extra=
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Return a dict suitable for ``logger.debug(..., extra=...)``.

    None values are dropped so records only carry meaningful fields.
    """
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Measure elapsed time of a ``with`` block."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds; while still running, time elapsed so far."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON including structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging() -> None:
    """Configure the root logger from environment variables.

    BUNDLE_RESOLVER_LOG_LEVEL selects the level (default INFO) and
    BUNDLE_RESOLVER_LOG_FMT selects ``human`` (default) or ``json`` output.
    Calling it again replaces the previously installed handler.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = os.environ.get(Constants.ENV_LOG_FMT, "human").lower()

    handler = logging.StreamHandler()
    handler.set_name("bundle-resolver")
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "bundle-resolver":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
