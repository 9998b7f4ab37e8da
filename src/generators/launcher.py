"""Generate the launcher-format ``net.minecraft`` component from the Mojang mirror."""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Dict, List

from cli_config import MetaConfig
from common import storage
from constants import Constants, Sources
from models.launcher import (
    LauncherPackage,
    LauncherVersionFile,
    LauncherVersionIndex,
    LauncherVersionIndexEntry,
    LegacyOverride,
)
from models.mojang import MojangVersionFile, VersionIndex
from updaters.mojang import MANIFEST_FILE

logger = logging.getLogger(__name__)


def load_legacy_overrides(static_dir: str) -> Dict[str, LegacyOverride]:
    """Read ``<static>/minecraft-legacy.json`` (``{"versions": {id: {...}}}``), if any."""
    path = os.path.join(static_dir, Constants.LEGACY_OVERRIDES_FILE)
    if not os.path.isfile(path):
        logger.debug("No legacy overrides at %s", path)
        return {}
    data = storage.read_json(path)
    return {
        version_id: LegacyOverride.from_dict(entry)
        for version_id, entry in (data.get("versions") or {}).items()
    }


def generate_minecraft(config: MetaConfig) -> LauncherVersionIndex:
    """Convert every mirrored version file and write the component.

    Every file is converted and serialized before anything is written, so a
    conversion failure leaves the previous output untouched.
    """
    mojang_dir = os.path.join(config.upstream_dir, Sources.MOJANG.value)
    manifest = VersionIndex.from_dict(storage.read_json(os.path.join(mojang_dir, MANIFEST_FILE)))
    overrides = load_legacy_overrides(config.static_dir)

    index = LauncherVersionIndex(name=Constants.MINECRAFT_NAME, uid=Constants.MINECRAFT_UID)
    rendered: Dict[str, str] = {}
    for entry in manifest:
        path = os.path.join(mojang_dir, "versions", f"{entry.id}.json")
        if not os.path.isfile(path):
            logger.warning("Version file for %s has not been mirrored, skipping", entry.id)
            continue
        mojang_file = MojangVersionFile.from_dict(storage.read_json(path), config.ceilings)
        converted = LauncherVersionFile.from_mojang_file(mojang_file, version=entry.id)
        if entry.id in overrides:
            logger.info("Applying legacy override to %s", entry.id)
            converted.apply_legacy_override(overrides[entry.id])

        text = storage.dumps_json(converted.to_dict(config.ceilings))
        rendered[entry.id] = text
        index.versions.append(LauncherVersionIndexEntry(
            version=entry.id,
            sha256=hashlib.sha256(text.encode("utf-8")).hexdigest(),
            type=converted.type,
            release_time=converted.release_time,
        ))

    recommended: List[str] = []
    latest_release = manifest.latest.get("release")
    if latest_release in rendered:
        recommended.append(latest_release)
    package = LauncherPackage(name=Constants.MINECRAFT_NAME, uid=Constants.MINECRAFT_UID, recommended=recommended)

    out_dir = os.path.join(config.launcher_dir, Constants.MINECRAFT_UID)
    for version_id, text in rendered.items():
        storage.write_text(os.path.join(out_dir, f"{version_id}.json"), text)
    storage.write_json(os.path.join(out_dir, "package.json"), package.to_dict(config.ceilings))
    storage.write_json(os.path.join(out_dir, "index.json"), index.to_dict(config.ceilings))
    logger.info("Generated %d %s versions", len(rendered), Constants.MINECRAFT_UID)
    return index
