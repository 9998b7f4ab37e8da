"""Resolvers that reconcile upstream metadata into normalized models."""

from .forge import ForgeResolver
from .installer_profile import resolve_installer_profile

__all__ = [
    "ForgeResolver",
    "resolve_installer_profile",
]
