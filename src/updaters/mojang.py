"""Mirror the primary platform's version manifest, version files and asset indexes."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from cli_config import MetaConfig
from common import http_client, storage
from constants import Constants, Sources
from errors import UnparseableMetadata
from models.mojang import MojangVersionFile, VersionIndex

logger = logging.getLogger(__name__)

MANIFEST_FILE = "version_manifest_v2.json"


class MojangUpdater:
    """Refreshes ``<upstream>/mojang`` from the launcher manifest.

    Only versions that are new, or whose upstream ``time`` moved forward, are
    downloaded again.
    """

    def __init__(self, config: MetaConfig, manifest_url: str = Constants.MOJANG_MANIFEST_URL):
        self.config = config
        self.manifest_url = manifest_url
        self.base_dir = os.path.join(config.upstream_dir, Sources.MOJANG.value)

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.base_dir, MANIFEST_FILE)

    def load_local_index(self) -> VersionIndex:
        if os.path.isfile(self.manifest_path):
            logger.info("Found local Mojang index!")
            return VersionIndex.from_dict(storage.read_json(self.manifest_path))
        logger.info("No local Mojang index found, starting from an empty index")
        return VersionIndex([])

    def run(self) -> Dict[str, Any]:
        """Perform one update; nothing is written unless every download succeeds.

        Returns:
            Summary with the refreshed version ids and asset ids.
        """
        local_index = self.load_local_index()

        logger.info("Downloading remote Mojang index...")
        remote_payload = http_client.fetch_json(self.manifest_url, context="mojang")
        remote_index = VersionIndex.from_dict(remote_payload)

        stale = local_index.stale_ids(remote_index)
        logger.info("Found %d new or updated versions", len(stale))

        version_files: Dict[str, Any] = {}
        assets: Dict[str, str] = {}
        for version_id in stale:
            entry = remote_index.get(version_id)
            logger.info("Downloading version file %s...", version_id)
            payload = http_client.fetch_json(entry.url, context="mojang")
            version_file = MojangVersionFile.from_dict(payload, self.config.ceilings)
            if version_file.asset_index is None:
                raise UnparseableMetadata(f"Version file {version_id} has no asset index")
            assets[version_file.asset_index.id] = version_file.asset_index.url
            version_files[version_id] = payload

        asset_payloads = {}
        for asset_id, asset_url in assets.items():
            logger.info("Downloading asset index %s...", asset_id)
            asset_payloads[asset_id] = http_client.fetch_json(asset_url, context="mojang")

        storage.ensure_dirs(self.base_dir, ["versions", "assets"])
        for version_id, payload in version_files.items():
            storage.write_json(os.path.join(self.base_dir, "versions", f"{version_id}.json"), payload)
        for asset_id, payload in asset_payloads.items():
            storage.write_json(os.path.join(self.base_dir, "assets", f"{asset_id}.json"), payload)
        logger.info("Saving new Mojang index...")
        storage.write_json(self.manifest_path, remote_payload)

        refreshed: List[str] = list(version_files)
        return {"versions": refreshed, "assets": sorted(asset_payloads)}
