"""Mirror Fabric's meta-v2 lists and record hashes for the jars they name."""
from __future__ import annotations

import dataclasses
import logging
import os
import zipfile
from datetime import datetime, timezone
from typing import Any, Dict, List

from cli_config import MetaConfig
from common import http_client, storage
from common.timestamps import format_timestamp
from constants import Constants, Sources
from errors import UnparseableMetadata
from models.coordinate import GradleSpecifier

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def jar_release_time(jar_path: str) -> datetime:
    """Newest last-modified time of any entry in the jar, read as UTC."""
    try:
        with zipfile.ZipFile(jar_path) as archive:
            stamps = [datetime(*info.date_time, tzinfo=timezone.utc) for info in archive.infolist()]
    except zipfile.BadZipFile as exc:
        raise UnparseableMetadata(f"{jar_path} is not a valid zip: {exc}") from exc
    return max(stamps, default=_EPOCH)


class FabricUpdater:
    """Refreshes ``<upstream>/fabric``.

    The meta lists are replaced on every run. Jar info and loader installer
    JSON files are only downloaded for entries that do not have them yet.
    """

    def __init__(self, config: MetaConfig, meta_url: str = Constants.FABRIC_META_URL):
        self.config = config
        self.meta_url = meta_url
        self.base_dir = os.path.join(config.upstream_dir, Sources.FABRIC.value)

    def _path(self, *parts: str) -> str:
        return os.path.join(self.base_dir, *parts)

    def run(self) -> Dict[str, Any]:
        """Perform one update.

        Returns:
            Summary with the mirrored list names and the maven coordinates
            whose jar info was computed during this run.
        """
        lists: Dict[str, Any] = {}
        for name in Constants.FABRIC_LISTS:
            logger.info("Downloading fabric index %s...", name)
            lists[name] = http_client.fetch_json(f"{self.meta_url}/{name}", context="fabric")
        for name, payload in lists.items():
            storage.write_json(self._path("meta-v2", f"{name}.json"), payload)

        processed: List[str] = []
        for component in Constants.FABRIC_JAR_COMPONENTS:
            for entry in lists[component]:
                if self.process_jar(entry["maven"]):
                    processed.append(entry["maven"])

        for entry in lists["loader"]:
            self.process_installer_json(entry["maven"], entry["version"])

        logger.info("Computed jar info for %d fabric artifacts", len(processed))
        return {"lists": list(lists), "jars": processed}

    def process_jar(self, maven: str) -> bool:
        """Write ``jars/<maven>.json`` with the jar's hashes, size and release time.

        Returns:
            False when the info file already existed.
        """
        stem = maven.replace(":", ".")
        info_path = self._path("jars", f"{stem}.json")
        if os.path.isfile(info_path):
            return False

        jar_path = self._path("jars", f"{stem}.jar")
        if not os.path.isfile(jar_path):
            url = f"{Constants.FABRIC_MAVEN_BASE}/{GradleSpecifier.parse(maven).full_path}"
            logger.info("Downloading fabric jar %s...", maven)
            storage.write_bytes(jar_path, http_client.fetch_bytes(url, context="fabric"))

        storage.write_json(info_path, {
            "releaseTime": format_timestamp(jar_release_time(jar_path)),
            "sha1": storage.file_digest(jar_path, "sha1"),
            "sha256": storage.file_digest(jar_path, "sha256"),
            "size": os.path.getsize(jar_path),
        })
        return True

    def process_installer_json(self, maven: str, version: str) -> None:
        path = self._path("loader-installer-json", f"{version}.json")
        if os.path.isfile(path):
            return
        coordinate = dataclasses.replace(GradleSpecifier.parse(maven), extension="json")
        url = f"{Constants.FABRIC_MAVEN_BASE}/{coordinate.full_path}"
        logger.info("Downloading fabric loader installer JSON %s...", version)
        storage.write_json(path, http_client.fetch_json(url, context="fabric"))
