"""Error taxonomy shared by the resolvers, models and updaters.

Every metadata problem derives from MetadataError (a ValueError), so callers
that only care about "the upstream data was unusable" can catch one type.
"""

from __future__ import annotations

from typing import Dict, List, Optional


class MetadataError(ValueError):
    """Base class for upstream metadata problems."""


class MalformedCoordinate(MetadataError):
    """Raised when a Gradle coordinate string cannot be parsed."""

    def __init__(self, specifier: str, reason: str = "expected group:artifact:version[:classifier][@ext]"):
        self.specifier = specifier
        self.reason = reason
        super().__init__(f"Invalid Gradle specifier '{specifier}': {reason}")


class UnparseableMetadata(MetadataError):
    """Raised when promotion keys or build strings do not follow the upstream grammar."""


class DataIntegrityFault(MetadataError):
    """Raised when upstream data contradicts itself (mc mismatch, duplicate classifier, ...)."""


class UnparseableInstallerProfile(MetadataError):
    """Raised when no installer-profile generation accepts a supported build's profile."""

    def __init__(self, long_version: str, errors: Optional[Dict[str, List[str]]] = None):
        self.long_version = long_version
        self.errors = errors or {}
        details = "; ".join(
            f"generation {gen}: {', '.join(msgs) or 'rejected'}" for gen, msgs in self.errors.items()
        )
        message = f"Failed to parse install_profile.json for version {long_version}"
        if details:
            message = f"{message} ({details})"
        super().__init__(message)


class MissingRequiredDownload(MetadataError):
    """Raised when a version file lacks a download every valid file must carry."""

    def __init__(self, version_id: Optional[str], download: str):
        self.version_id = version_id
        self.download = download
        super().__init__(f"Version file {version_id} has no '{download}' download")


class UnsupportedComplianceLevel(MetadataError):
    """Raised for compliance levels the launcher schema cannot express."""

    def __init__(self, got: int, max_supported: int):
        self.got = got
        self.max = max_supported
        super().__init__(
            f"Unsupported Mojang compliance level: {got}. Max supported is: {max_supported}"
        )


class UnsupportedFormatVersion(MetadataError):
    """Raised when a bounded format-version field exceeds its configured ceiling."""

    def __init__(self, got: int, max_supported: int, field: str = "formatVersion"):
        self.got = got
        self.max = max_supported
        self.field = field
        super().__init__(
            f"{field} {got} is not supported, max supported version is {max_supported}"
        )


class FetchError(RuntimeError):
    """Raised by the fetch layer when an upstream document cannot be retrieved."""

    def __init__(self, url: str, context: str, status_code: int = 0, detail: str = ""):
        self.url = url
        self.context = context
        self.status_code = status_code
        self.detail = detail
        message = f"{context} fetch failed for {url}"
        if status_code:
            message += f" (status {status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
