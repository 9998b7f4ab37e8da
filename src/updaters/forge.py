"""Mirror Forge metadata: derived index, installer profiles and installer info."""
from __future__ import annotations

import io
import json
import logging
import os
import zipfile
from typing import Any, Dict, Optional

from cli_config import MetaConfig
from common import http_client, storage
from constants import Constants, Sources
from errors import MetadataError, UnparseableInstallerProfile, UnparseableMetadata
from models.forge import DerivedForgeIndex, ForgeVersion
from models.mojang import MojangVersionFile
from resolvers.forge import ForgeResolver
from resolvers.installer_profile import resolve_installer_profile

logger = logging.getLogger(__name__)

SUBDIRS = ["jars", "installer_info", "installer_manifests", "version_manifests", "files_manifests"]


class ForgeUpdater:
    """Builds ``<upstream>/forge`` from the Forge maven metadata and promotions."""

    def __init__(self, config: MetaConfig):
        self.config = config
        self.base_dir = os.path.join(config.upstream_dir, Sources.FORGE.value)

    def _path(self, *parts: str) -> str:
        return os.path.join(self.base_dir, *parts)

    def files_manifest(self, long_version: str) -> Dict[str, Any]:
        """Files manifest for one build, served from the on-disk cache when present."""
        cached = self._path("files_manifests", f"{long_version}.json")
        if os.path.isfile(cached):
            logger.debug("Using cached file manifest for version %s", long_version)
            return storage.read_json(cached)
        url = Constants.FORGE_FILE_MANIFEST_URL.format(long_version=long_version)
        manifest = http_client.fetch_json(url, context="forge")
        storage.write_json(cached, manifest)
        return manifest

    def run(self) -> DerivedForgeIndex:
        """Resolve and persist the derived index, then process installers."""
        storage.ensure_dirs(self.base_dir, SUBDIRS)

        logger.info("Downloading remote version list from Forge...")
        builds = http_client.fetch_json(Constants.FORGE_MAVEN_METADATA_URL, context="forge")
        logger.info("Downloading promotion list from Forge...")
        promotions = http_client.fetch_json(Constants.FORGE_PROMOTIONS_URL, context="forge")

        index = ForgeResolver(self.files_manifest).resolve(promotions, builds)

        logger.info("Dumping index files...")
        storage.write_json(self._path("maven-metadata.json"), builds)
        storage.write_json(self._path("promotions_slim.json"), promotions)
        storage.write_json(self._path("derived_index.json"), index.to_dict())

        logger.info("Downloading installers and dumping profiles...")
        for entry in index.versions.values():
            self.process_installer(ForgeVersion(entry))
        return index

    def process_installer(self, version: ForgeVersion) -> None:
        """Extract version.json / install_profile.json and record installer info."""
        if version.url() is None:
            logger.info("Skipping build %s: No valid files", version.build)
            return
        if not version.uses_installer():
            return

        long_version = version.long_version
        jar_path = self._path("jars", version.file_name())
        info_path = self._path("installer_info", f"{long_version}.json")
        profile_path = self._path("installer_manifests", f"{long_version}.json")
        version_json_path = self._path("version_manifests", f"{long_version}.json")

        refresh_required = not os.path.isfile(profile_path) or not os.path.isfile(info_path)
        if refresh_required and not os.path.isfile(jar_path):
            logger.info("Downloading Forge version %s...", long_version)
            storage.write_bytes(jar_path, http_client.fetch_bytes(version.url(), context="forge"))

        if not os.path.isfile(profile_path):
            logger.info("Processing installer for version %s...", long_version)
            self._extract_profiles(version, jar_path, profile_path, version_json_path)

        if not os.path.isfile(info_path):
            storage.write_json(info_path, {
                "sha1hash": storage.file_digest(jar_path, "sha1"),
                "sha256hash": storage.file_digest(jar_path, "sha256"),
                "size": os.path.getsize(jar_path),
            })

    def _extract_profiles(self, version: ForgeVersion, jar_path: str, profile_path: str, version_json_path: str) -> None:
        long_version = version.long_version
        try:
            with open(jar_path, "rb") as fh:
                archive = zipfile.ZipFile(io.BytesIO(fh.read()))
        except zipfile.BadZipFile as exc:
            raise UnparseableMetadata(f"Installer for {long_version} is not a valid zip: {exc}") from exc

        with archive:
            names = set(archive.namelist())
            if "version.json" in names:
                self._write_version_json(long_version, archive.read("version.json"), version_json_path)

            raw_profile = archive.read("install_profile.json") if "install_profile.json" in names else None

        payload = _loads(raw_profile)
        if payload is None:
            if version.is_supported():
                raise UnparseableInstallerProfile(long_version, {"archive": ["install_profile.json missing or not JSON"]})
            logger.warning("Installer for %s has no readable install_profile.json", long_version)
            return

        profile = resolve_installer_profile(payload, long_version, version.is_supported(), self.config.ceilings)
        if profile is not None:
            storage.write_json(profile_path, profile.to_dict())

    def _write_version_json(self, long_version: str, raw: bytes, path: str) -> None:
        payload = _loads(raw)
        try:
            if payload is None:
                raise UnparseableMetadata("not JSON")
            version_file = MojangVersionFile.from_dict(payload, self.config.ceilings)
        except MetadataError as exc:
            logger.warning("Failed to parse version.json for version %s: %s", long_version, exc)
            return
        storage.write_json(path, version_file.to_dict(self.config.ceilings))


def _loads(raw: Optional[bytes]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
