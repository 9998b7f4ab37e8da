"""Updaters that mirror upstream metadata into the upstream directory."""

from .fabric import FabricUpdater
from .forge import ForgeUpdater
from .mojang import MojangUpdater
from .passthrough import update_liteloader

__all__ = ["FabricUpdater", "ForgeUpdater", "MojangUpdater", "update_liteloader"]
