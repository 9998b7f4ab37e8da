"""Centralized logging setup and structured-log helpers.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
``configure_logging()`` once. DEBUG traces attach an ``extra`` mapping built by
``extra_context`` so log processors can filter on event/component/action.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY_KEYS = ("token", "key", "secret", "signature", "sig", "auth")


def configure_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Level name; falls back to the LOADERMETA_LOG_LEVEL env var, then INFO.
        logfile: Optional file path; records go to stderr when omitted.
    """
    level_name = (level or os.environ.get(Constants.LOG_LEVEL_ENV) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    handlers = [logging.FileHandler(logfile, encoding="utf-8")] if logfile else [logging.StreamHandler()]
    logging.basicConfig(level=level_value, format=Constants.LOG_FORMAT, handlers=handlers, force=True)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Cheap guard so DEBUG payloads are only built when they will be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for structured log records, dropping None values."""
    return {key: value for key, value in fields.items() if value is not None}


def safe_url(url: str) -> str:
    """Return the URL with credential-like query parameters redacted."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.query:
        return url
    redacted = []
    for pair in parts.query.split("&"):
        name, _, _value = pair.partition("=")
        if any(marker in name.lower() for marker in _SENSITIVE_QUERY_KEYS):
            redacted.append(f"{name}=REDACTED")
        else:
            redacted.append(pair)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(redacted), parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
