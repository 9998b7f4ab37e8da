"""Models for the primary platform's (Mojang) launcher metadata.

Covers the version manifest (``version_manifest_v2.json``) and the per-version
files it points to. Only the fields we reconcile are typed; free-form sections
(arguments, logging, rules, ...) are carried as plain JSON values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from common.timestamps import format_timestamp, parse_timestamp
from errors import DataIntegrityFault, MalformedCoordinate, UnparseableMetadata
from models.ceilings import DEFAULT_CEILINGS, VersionCeilings, check_ceiling
from models.coordinate import GradleSpecifier

logger = logging.getLogger(__name__)

MINIMUM_LAUNCHER_VERSION_FIELD = "minimumLauncherVersion"


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise UnparseableMetadata(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class VersionEntry:
    """A single entry of the launcher manifest's ``versions`` array."""
    id: str
    release_time: datetime
    time: datetime
    type: str
    url: str
    sha1: Optional[str] = None
    compliance_level: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionEntry":
        data = _require_mapping(data, "version entry")
        try:
            return cls(
                id=data["id"],
                release_time=parse_timestamp(data["releaseTime"]),
                time=parse_timestamp(data["time"]),
                type=data["type"],
                url=data["url"],
                sha1=data.get("sha1"),
                compliance_level=data.get("complianceLevel"),
            )
        except KeyError as exc:
            raise UnparseableMetadata(f"version entry is missing {exc.args[0]!r}") from exc
        except ValueError as exc:
            raise UnparseableMetadata(f"version entry {data.get('id')!r}: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "type": self.type,
            "url": self.url,
            "time": format_timestamp(self.time),
            "releaseTime": format_timestamp(self.release_time),
            "sha1": self.sha1,
            "complianceLevel": self.compliance_level,
        })


class VersionIndex:
    """Ordered version entries plus an id lookup built once, at construction.

    The entries are copied into a tuple, so the lookup can never drift from
    the sequence it was built from.
    """

    def __init__(self, versions: Iterable[VersionEntry], latest: Optional[Dict[str, str]] = None):
        self._versions = tuple(versions)
        self.latest: Dict[str, str] = dict(latest or {})
        by_id: Dict[str, VersionEntry] = {}
        for entry in self._versions:
            if entry.id in by_id:
                raise DataIntegrityFault(f"Duplicate version id {entry.id} in version index")
            by_id[entry.id] = entry
        self._by_id = by_id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionIndex":
        data = _require_mapping(data, "version manifest")
        versions = data.get("versions", [])
        if not isinstance(versions, list):
            raise UnparseableMetadata("version manifest 'versions' must be an array")
        return cls((VersionEntry.from_dict(v) for v in versions), data.get("latest"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latest": dict(self.latest),
            "versions": [entry.to_dict() for entry in self._versions],
        }

    @property
    def versions(self) -> tuple:
        return self._versions

    def get(self, version_id: str) -> Optional[VersionEntry]:
        return self._by_id.get(version_id)

    def ids(self) -> List[str]:
        return [entry.id for entry in self._versions]

    def __contains__(self, version_id: object) -> bool:
        return version_id in self._by_id

    def __iter__(self) -> Iterator[VersionEntry]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def stale_ids(self, remote: "VersionIndex") -> List[str]:
        """Ids in ``remote`` that are missing here or were updated upstream since.

        Returned in ``remote`` order.
        """
        stale = []
        for entry in remote:
            local = self.get(entry.id)
            if local is None or entry.time > local.time:
                stale.append(entry.id)
        return stale


@dataclass
class ArtifactBase:
    url: str
    sha1: Optional[str] = None
    size: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArtifactBase":
        data = _require_mapping(data, "artifact")
        if "url" not in data:
            raise UnparseableMetadata("artifact is missing 'url'")
        return cls(url=data["url"], sha1=data.get("sha1"), size=data.get("size"))

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"sha1": self.sha1, "size": self.size, "url": self.url})


@dataclass
class AssetIndex:
    id: str
    url: str
    sha1: Optional[str] = None
    size: Optional[int] = None
    total_size: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetIndex":
        data = _require_mapping(data, "asset index")
        try:
            return cls(
                id=data["id"],
                url=data["url"],
                sha1=data.get("sha1"),
                size=data.get("size"),
                total_size=data.get("totalSize"),
            )
        except KeyError as exc:
            raise UnparseableMetadata(f"asset index is missing {exc.args[0]!r}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "sha1": self.sha1,
            "size": self.size,
            "totalSize": self.total_size,
            "url": self.url,
        })


@dataclass
class Library:
    """A classpath/native library as listed in a version file."""
    name: GradleSpecifier
    downloads: Optional[Dict[str, Any]] = None
    natives: Optional[Dict[str, str]] = None
    rules: Optional[List[Dict[str, Any]]] = None
    extract: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Library":
        data = _require_mapping(data, "library")
        if "name" not in data:
            raise UnparseableMetadata("library is missing 'name'")
        return cls(
            name=GradleSpecifier.parse(data["name"]),
            downloads=data.get("downloads"),
            natives=data.get("natives"),
            rules=data.get("rules"),
            extract=data.get("extract"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "name": str(self.name),
            "downloads": self.downloads,
            "natives": self.natives,
            "rules": self.rules,
            "extract": self.extract,
        })


def parse_libraries(raw: Any, owner: Optional[str]) -> Optional[List[Library]]:
    """Parse a ``libraries`` array, skipping entries whose coordinate is malformed."""
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise UnparseableMetadata(f"{owner}: 'libraries' must be an array")
    libraries = []
    for item in raw:
        try:
            libraries.append(Library.from_dict(item))
        except MalformedCoordinate as exc:
            logger.warning("%s: skipping library: %s", owner, exc)
    return libraries


@dataclass
class MojangVersionFile:
    """A per-version file (``<id>.json``) of the primary platform."""
    id: Optional[str] = None
    arguments: Optional[Dict[str, Any]] = None
    asset_index: Optional[AssetIndex] = None
    assets: Optional[str] = None
    downloads: Optional[Dict[str, ArtifactBase]] = None
    libraries: Optional[List[Library]] = None
    main_class: Optional[str] = None
    process_arguments: Optional[str] = None
    minecraft_arguments: Optional[str] = None
    minimum_launcher_version: Optional[int] = None
    release_time: Optional[datetime] = None
    time: Optional[datetime] = None
    inherits_from: Optional[str] = None
    logging: Optional[Dict[str, Any]] = None
    compliance_level: Optional[int] = None
    java_version: Optional[Dict[str, Any]] = None
    type: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = frozenset({
        "id", "arguments", "assetIndex", "assets", "downloads", "libraries", "mainClass",
        "processArguments", "minecraftArguments", MINIMUM_LAUNCHER_VERSION_FIELD,
        "releaseTime", "time", "inheritsFrom", "logging", "complianceLevel", "javaVersion", "type",
    })

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ceilings: VersionCeilings = DEFAULT_CEILINGS) -> "MojangVersionFile":
        """Parse a version file.

        Raises:
            UnsupportedFormatVersion: ``minimumLauncherVersion`` exceeds the ceiling.
            UnparseableMetadata: The payload is not shaped like a version file.
        """
        data = _require_mapping(data, "version file")
        version_id = data.get("id")
        minimum_launcher_version = check_ceiling(
            data.get(MINIMUM_LAUNCHER_VERSION_FIELD),
            ceilings.max_launcher_version,
            MINIMUM_LAUNCHER_VERSION_FIELD,
        )
        downloads = data.get("downloads")
        if downloads is not None:
            downloads = {name: ArtifactBase.from_dict(d) for name, d in _require_mapping(downloads, "downloads").items()}
        asset_index = data.get("assetIndex")
        try:
            release_time = parse_timestamp(data.get("releaseTime"))
            time = parse_timestamp(data.get("time"))
        except ValueError as exc:
            raise UnparseableMetadata(f"version file {version_id}: {exc}") from exc
        return cls(
            id=version_id,
            arguments=data.get("arguments"),
            asset_index=AssetIndex.from_dict(asset_index) if asset_index is not None else None,
            assets=data.get("assets"),
            downloads=downloads,
            libraries=parse_libraries(data.get("libraries"), version_id),
            main_class=data.get("mainClass"),
            process_arguments=data.get("processArguments"),
            minecraft_arguments=data.get("minecraftArguments"),
            minimum_launcher_version=minimum_launcher_version,
            release_time=release_time,
            time=time,
            inherits_from=data.get("inheritsFrom"),
            logging=data.get("logging"),
            compliance_level=data.get("complianceLevel"),
            java_version=data.get("javaVersion"),
            type=data.get("type"),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS},
        )

    def to_dict(self, ceilings: VersionCeilings = DEFAULT_CEILINGS) -> Dict[str, Any]:
        minimum_launcher_version = check_ceiling(
            self.minimum_launcher_version,
            ceilings.max_launcher_version,
            MINIMUM_LAUNCHER_VERSION_FIELD,
        )
        out = dict(self.extra)
        out.update(_drop_none({
            "id": self.id,
            "arguments": self.arguments,
            "assetIndex": self.asset_index.to_dict() if self.asset_index else None,
            "assets": self.assets,
            "downloads": {k: v.to_dict() for k, v in self.downloads.items()} if self.downloads is not None else None,
            "libraries": [lib.to_dict() for lib in self.libraries] if self.libraries is not None else None,
            "mainClass": self.main_class,
            "processArguments": self.process_arguments,
            "minecraftArguments": self.minecraft_arguments,
            MINIMUM_LAUNCHER_VERSION_FIELD: minimum_launcher_version,
            "releaseTime": format_timestamp(self.release_time),
            "time": format_timestamp(self.time),
            "inheritsFrom": self.inherits_from,
            "logging": self.logging,
            "complianceLevel": self.compliance_level,
            "javaVersion": self.java_version,
            "type": self.type,
        }))
        return out
