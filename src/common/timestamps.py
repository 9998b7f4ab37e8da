"""Helpers for the ISO-8601 timestamps used throughout upstream metadata."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime (UTC when no offset is given).

    Raises:
        ValueError: If ``value`` is a non-empty string that is not ISO-8601.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid timestamp: {value!r}")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime the way upstream manifests do (``2021-01-01T00:00:00+00:00``)."""
    if value is None:
        return None
    return value.isoformat()
