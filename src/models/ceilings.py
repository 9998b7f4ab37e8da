"""Upper bounds for the format-version fields of the schemas we read and write.

Ceilings are passed explicitly to every parse/serialize call so that two runs
in one process can use different limits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from constants import Constants
from errors import UnparseableMetadata, UnsupportedFormatVersion


@dataclass(frozen=True)
class VersionCeilings:
    """Maximum supported values for bounded version fields."""
    max_launcher_version: int = Constants.MAX_MOJANG_SUPPORTED_VERSION
    format_version: int = Constants.CURRENT_LAUNCHER_FORMAT_VERSION


DEFAULT_CEILINGS = VersionCeilings()


def check_ceiling(value: Optional[int], maximum: int, field: str) -> Optional[int]:
    """Return ``value`` unchanged, raising when it exceeds ``maximum``.

    Used symmetrically on the read and the write path.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise UnparseableMetadata(f"{field} must be an integer, got {value!r}")
    if value > maximum:
        raise UnsupportedFormatVersion(value, maximum, field)
    return value
