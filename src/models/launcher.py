"""The downstream launcher's canonical metadata schema and the Mojang converter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from common.timestamps import format_timestamp, parse_timestamp
from constants import Constants
from errors import MissingRequiredDownload, UnparseableMetadata, UnsupportedComplianceLevel
from models.ceilings import DEFAULT_CEILINGS, VersionCeilings, check_ceiling
from models.coordinate import GradleSpecifier
from models.mojang import AssetIndex, Library, MojangVersionFile, _drop_none

FORMAT_VERSION_FIELD = "formatVersion"


def _check_format_version(value: Any, ceilings: VersionCeilings) -> int:
    return check_ceiling(value, ceilings.format_version, FORMAT_VERSION_FIELD)


@dataclass
class LauncherLibrary(Library):
    """A Mojang library widened with the launcher's optional hint fields."""
    url: Optional[str] = None
    mmc_hint: Optional[str] = None

    @classmethod
    def from_library(cls, lib: Library) -> "LauncherLibrary":
        return cls(
            name=lib.name,
            downloads=lib.downloads,
            natives=lib.natives,
            rules=lib.rules,
            extract=lib.extract,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LauncherLibrary":
        lib = cls.from_library(Library.from_dict(data))
        lib.url = data.get("url")
        lib.mmc_hint = data.get("MMC-hint")
        return lib

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out.update(_drop_none({"url": self.url, "MMC-hint": self.mmc_hint}))
        return out


@dataclass
class DependencyEntry:
    uid: str
    equals: Optional[str] = None
    suggests: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyEntry":
        return cls(uid=data["uid"], equals=data.get("equals"), suggests=data.get("suggests"))

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"uid": self.uid, "equals": self.equals, "suggests": self.suggests})


@dataclass
class LegacyOverride:
    """A hand-authored patch for versions whose upstream metadata is unreliable."""
    main_class: Optional[str] = None
    applet_class: Optional[str] = None
    release_time: Optional[datetime] = None
    add_traits: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LegacyOverride":
        try:
            release_time = parse_timestamp(data.get("releaseTime"))
        except ValueError as exc:
            raise UnparseableMetadata(f"legacy override: {exc}") from exc
        return cls(
            main_class=data.get("mainClass"),
            applet_class=data.get("appletClass"),
            release_time=release_time,
            add_traits=data.get("+traits"),
        )


def _libraries(raw: Any) -> Optional[List[LauncherLibrary]]:
    if raw is None:
        return None
    return [LauncherLibrary.from_dict(item) for item in raw]


@dataclass
class LauncherVersionFile:
    """One component version (``<uid>/<version>.json``) in the launcher schema."""
    name: str
    version: str
    uid: str
    format_version: int = Constants.CURRENT_LAUNCHER_FORMAT_VERSION
    requires: Optional[List[DependencyEntry]] = None
    conflicts: Optional[List[DependencyEntry]] = None
    volatile: Optional[bool] = None
    asset_index: Optional[AssetIndex] = None
    libraries: Optional[List[LauncherLibrary]] = None
    maven_files: Optional[List[LauncherLibrary]] = None
    main_jar: Optional[LauncherLibrary] = None
    jar_mods: Optional[List[LauncherLibrary]] = None
    main_class: Optional[str] = None
    applet_class: Optional[str] = None
    minecraft_arguments: Optional[str] = None
    release_time: Optional[datetime] = None
    type: Optional[str] = None
    add_traits: Optional[List[str]] = None
    add_tweakers: Optional[List[str]] = None
    order: Optional[int] = None

    @classmethod
    def from_mojang_file(
        cls,
        file: MojangVersionFile,
        name: str = Constants.MINECRAFT_NAME,
        uid: str = Constants.MINECRAFT_UID,
        version: Optional[str] = None,
    ) -> "LauncherVersionFile":
        """Convert a primary-platform version file.

        Raises:
            MissingRequiredDownload: The file has an id but no ``client`` download.
            UnsupportedComplianceLevel: Any compliance level other than 1.
        """
        converted = cls(name=name, version=version or file.id, uid=uid)
        converted.asset_index = file.asset_index
        if file.libraries is not None:
            converted.libraries = [LauncherLibrary.from_library(lib) for lib in file.libraries]
        converted.main_class = file.main_class

        if file.id is not None:
            client = (file.downloads or {}).get("client")
            if client is None:
                raise MissingRequiredDownload(file.id, "client")
            converted.main_jar = LauncherLibrary(
                name=GradleSpecifier("com.mojang", "minecraft", file.id, classifier="client"),
                downloads={"artifact": client.to_dict()},
            )

        converted.minecraft_arguments = file.minecraft_arguments
        converted.release_time = file.release_time
        converted.type = file.type

        if file.compliance_level is not None:
            if file.compliance_level != Constants.MAX_SUPPORTED_COMPLIANCE_LEVEL:
                raise UnsupportedComplianceLevel(file.compliance_level, Constants.MAX_SUPPORTED_COMPLIANCE_LEVEL)
            converted.add_traits = (converted.add_traits or []) + [Constants.COMPLIANCE_TRAIT]

        return converted

    def apply_legacy_override(self, override: LegacyOverride) -> None:
        """Overwrite class names and release time from ``override``.

        Libraries and legacy arguments are dropped: for hand-patched legacy
        versions they come from the override's companion files instead.
        """
        self.main_class = override.main_class
        self.applet_class = override.applet_class
        if override.release_time is not None:
            self.release_time = override.release_time
        if override.add_traits:
            self.add_traits = (self.add_traits or []) + list(override.add_traits)
        self.libraries = None
        self.minecraft_arguments = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ceilings: VersionCeilings = DEFAULT_CEILINGS) -> "LauncherVersionFile":
        """Parse a launcher file.

        Raises:
            UnsupportedFormatVersion: ``formatVersion`` exceeds the ceiling.
        """
        format_version = data.get(FORMAT_VERSION_FIELD, Constants.CURRENT_LAUNCHER_FORMAT_VERSION)
        _check_format_version(format_version, ceilings)
        main_jar = data.get("mainJar")
        asset_index = data.get("assetIndex")
        try:
            release_time = parse_timestamp(data.get("releaseTime"))
        except ValueError as exc:
            raise UnparseableMetadata(f"{data.get('uid')} {data.get('version')}: {exc}") from exc
        try:
            return cls(
                name=data["name"],
                version=data["version"],
                uid=data["uid"],
                format_version=format_version,
                requires=[DependencyEntry.from_dict(d) for d in data["requires"]] if "requires" in data else None,
                conflicts=[DependencyEntry.from_dict(d) for d in data["conflicts"]] if "conflicts" in data else None,
                volatile=data.get("volatile"),
                asset_index=AssetIndex.from_dict(asset_index) if asset_index is not None else None,
                libraries=_libraries(data.get("libraries")),
                maven_files=_libraries(data.get("mavenFiles")),
                main_jar=LauncherLibrary.from_dict(main_jar) if main_jar is not None else None,
                jar_mods=_libraries(data.get("jarMods")),
                main_class=data.get("mainClass"),
                applet_class=data.get("appletClass"),
                minecraft_arguments=data.get("minecraftArguments"),
                release_time=release_time,
                type=data.get("type"),
                add_traits=data.get("+traits"),
                add_tweakers=data.get("+tweakers"),
                order=data.get("order"),
            )
        except KeyError as exc:
            raise UnparseableMetadata(f"launcher version file is missing {exc.args[0]!r}") from exc

    def to_dict(self, ceilings: VersionCeilings = DEFAULT_CEILINGS) -> Dict[str, Any]:
        """Serialize; ``formatVersion`` above the ceiling raises UnsupportedFormatVersion."""
        _check_format_version(self.format_version, ceilings)

        def libs(items):
            return [lib.to_dict() for lib in items] if items is not None else None

        def deps(items):
            return [d.to_dict() for d in items] if items is not None else None

        return _drop_none({
            FORMAT_VERSION_FIELD: self.format_version,
            "name": self.name,
            "version": self.version,
            "uid": self.uid,
            "requires": deps(self.requires),
            "conflicts": deps(self.conflicts),
            "volatile": self.volatile,
            "assetIndex": self.asset_index.to_dict() if self.asset_index else None,
            "libraries": libs(self.libraries),
            "mavenFiles": libs(self.maven_files),
            "mainJar": self.main_jar.to_dict() if self.main_jar else None,
            "jarMods": libs(self.jar_mods),
            "mainClass": self.main_class,
            "appletClass": self.applet_class,
            "minecraftArguments": self.minecraft_arguments,
            "releaseTime": format_timestamp(self.release_time),
            "type": self.type,
            "+traits": self.add_traits,
            "+tweakers": self.add_tweakers,
            "order": self.order,
        })


@dataclass
class LauncherPackage:
    """Shared per-component data (``<uid>/package.json``)."""
    name: str
    uid: str
    format_version: int = Constants.CURRENT_LAUNCHER_FORMAT_VERSION
    recommended: Optional[List[str]] = None
    authors: Optional[List[str]] = None
    description: Optional[str] = None
    project_url: Optional[str] = None

    def to_dict(self, ceilings: VersionCeilings = DEFAULT_CEILINGS) -> Dict[str, Any]:
        _check_format_version(self.format_version, ceilings)
        return _drop_none({
            FORMAT_VERSION_FIELD: self.format_version,
            "name": self.name,
            "uid": self.uid,
            "recommended": self.recommended,
            "authors": self.authors,
            "description": self.description,
            "projectUrl": self.project_url,
        })


@dataclass
class LauncherVersionIndexEntry:
    version: str
    sha256: str
    type: Optional[str] = None
    release_time: Optional[datetime] = None
    requires: Optional[List[DependencyEntry]] = None
    recommended: Optional[bool] = None
    volatile: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "version": self.version,
            "type": self.type,
            "releaseTime": format_timestamp(self.release_time),
            "requires": [d.to_dict() for d in self.requires] if self.requires is not None else None,
            "recommended": self.recommended,
            "volatile": self.volatile,
            "sha256": self.sha256,
        })


@dataclass
class LauncherVersionIndex:
    """All versions of one component (``<uid>/index.json``), newest first."""
    name: str
    uid: str
    format_version: int = Constants.CURRENT_LAUNCHER_FORMAT_VERSION
    versions: List[LauncherVersionIndexEntry] = field(default_factory=list)

    def to_dict(self, ceilings: VersionCeilings = DEFAULT_CEILINGS) -> Dict[str, Any]:
        _check_format_version(self.format_version, ceilings)
        ordered = sorted(
            self.versions,
            key=lambda e: (e.release_time is not None, e.release_time or datetime.min),
            reverse=True,
        )
        return {
            FORMAT_VERSION_FIELD: self.format_version,
            "name": self.name,
            "uid": self.uid,
            "versions": [entry.to_dict() for entry in ordered],
        }
