"""Resolve an ``install_profile.json`` payload against the known generations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft7Validator

from common.logging_utils import extra_context, is_debug_enabled
from errors import UnparseableInstallerProfile
from models.ceilings import DEFAULT_CEILINGS, VersionCeilings
from models.installer import (
    INSTALLER_PROFILE_GENERATIONS,
    InstallerProfileV1,
    InstallerProfileV1_5,
    InstallerProfileV2,
)

logger = logging.getLogger(__name__)

InstallerProfile = Union[InstallerProfileV1, InstallerProfileV2, InstallerProfileV1_5]

_VALIDATORS = [(variant, Draft7Validator(variant.SCHEMA)) for variant in INSTALLER_PROFILE_GENERATIONS]


def _validation_errors(validator: Draft7Validator, payload: Any) -> List[str]:
    """Return human-readable validation messages, empty when the payload is valid."""
    errs = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    messages = []
    for err in errs:
        path = "/".join(str(p) for p in err.path)
        messages.append(f"at '{path}': {err.message}" if path else err.message)
    return messages


def resolve_installer_profile(
    payload: Any,
    long_version: str,
    supported: bool,
    ceilings: VersionCeilings = DEFAULT_CEILINGS,
) -> Optional[InstallerProfile]:
    """Return the first installer-profile generation that accepts ``payload``.

    Generations are tried in order 1, 2, 1.5 and later ones are not attempted
    once one validates.

    Args:
        payload: Parsed ``install_profile.json``.
        long_version: Build the profile belongs to (for diagnostics).
        supported: Whether the build is one we are expected to handle.
        ceilings: Bounds for the launcher version embedded in generation 1.

    Returns:
        The parsed profile, or None when no generation matched and the build is
        a legacy one.

    Raises:
        UnparseableInstallerProfile: No generation matched a supported build;
            carries every generation's validation messages.
        UnsupportedFormatVersion: A generation-1 ``versionInfo`` needs a newer
            launcher than ``ceilings`` allows.
    """
    failures: Dict[str, List[str]] = {}
    for variant, validator in _VALIDATORS:
        messages = _validation_errors(validator, payload)
        if not messages:
            if is_debug_enabled(logger):
                logger.debug(
                    "Installer profile resolved",
                    extra=extra_context(
                        event="decision",
                        component="installer_profile",
                        action="resolve",
                        outcome=f"generation_{variant.GENERATION}",
                        target=long_version,
                    )
                )
            return variant.from_dict(payload, ceilings)
        failures[variant.GENERATION] = messages

    if supported:
        raise UnparseableInstallerProfile(long_version, failures)
    logger.warning("Failed to parse install_profile.json for version %s, skipping", long_version)
    return None
