"""Centralized logging helpers.

Provides one-shot logging configuration plus the small utilities used for
structured DEBUG traces: ``extra_context`` builds the ``extra=`` mapping,
``safe_url`` strips credentials and query strings before URLs reach a log
line, and ``Timer`` measures request durations.
"""

from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional

from constants import Constants

_SENSITIVE_QUERY_KEYS = ("token", "key", "secret", "password", "auth")


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once.

    Level precedence: explicit ``level`` argument, then the
    ``PKGFETCH_LOG_LEVEL`` environment variable, then INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=Constants.LOG_FORMAT)
    root.setLevel(level_value)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping, dropping fields whose value is None."""
    return {key: value for key, value in fields.items() if value is not None}


def redact(value: Optional[str]) -> str:
    """Mask a secret, keeping a short prefix for correlation."""
    if not value:
        return ""
    if len(value) <= 4:
        return "****"
    return f"{value[:4]}****"


def safe_url(url: str) -> str:
    """Return ``url`` with userinfo removed and sensitive query values masked."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    query = parts.query
    if query:
        pairs = urllib.parse.parse_qsl(query, keep_blank_values=True)
        masked = [
            (k, redact(v) if any(s in k.lower() for s in _SENSITIVE_QUERY_KEYS) else v)
            for k, v in pairs
        ]
        query = urllib.parse.urlencode(masked)
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Milliseconds elapsed so far, or in total once the block exited."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
