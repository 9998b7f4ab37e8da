"""Models for Forge build metadata and the derived per-Minecraft-version index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from constants import Constants

UNIVERSAL_CLASSIFIERS = ("universal", "client")
UNIVERSAL_EXTENSIONS = ("jar", "zip")


@dataclass(frozen=True)
class ForgeFile:
    """One downloadable file of a build, selected from its files manifest."""
    classifier: str
    hash: str
    extension: str

    def file_name(self, long_version: str) -> str:
        return f"forge-{long_version}-{self.classifier}.{self.extension}"

    def url(self, long_version: str) -> str:
        return f"{Constants.FORGE_MAVEN_BASE}/{long_version}/{self.file_name(long_version)}"

    def to_dict(self) -> Dict[str, Any]:
        return {"classifier": self.classifier, "hash": self.hash, "extension": self.extension}


@dataclass
class ForgeEntry:
    """A single Forge build in the derived index.

    ``latest`` is only ever flipped by the resolver's post-pass.
    """
    long_version: str
    mc_version: str
    version: str
    build: int
    branch: Optional[str] = None
    latest: bool = False
    recommended: bool = False
    files: Dict[str, ForgeFile] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "longversion": self.long_version,
            "mcversion": self.mc_version,
            "version": self.version,
            "build": self.build,
            "branch": self.branch,
            "latest": self.latest,
            "recommended": self.recommended,
            "files": {k: v.to_dict() for k, v in self.files.items()},
        }


@dataclass
class ForgeMcVersionInfo:
    latest: Optional[str] = None
    recommended: Optional[str] = None
    versions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"latest": self.latest, "recommended": self.recommended, "versions": list(self.versions)}


@dataclass
class DerivedForgeIndex:
    """Per-Minecraft-version summary plus every build keyed by long version."""
    mc_versions: Dict[str, ForgeMcVersionInfo] = field(default_factory=dict)
    versions: Dict[str, ForgeEntry] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mc_versions": {mc: info.to_dict() for mc, info in self.mc_versions.items()},
            "versions": {lv: entry.to_dict() for lv, entry in self.versions.items()},
        }


class ForgeVersion:
    """Artifact-selection view of a ForgeEntry: which file a launcher should fetch."""

    def __init__(self, entry: ForgeEntry):
        self.build = entry.build
        self.raw_version = entry.version
        self.mc_version = entry.mc_version
        self.mc_version_sane = entry.mc_version.replace("_pre", "-pre", 1)
        self.branch = entry.branch
        self.long_version = f"{entry.mc_version}-{entry.version}"
        if entry.branch:
            self.long_version = f"{self.long_version}-{entry.branch}"

        self.installer_file_name: Optional[str] = None
        self.installer_url: Optional[str] = None
        self.universal_file_name: Optional[str] = None
        self.universal_url: Optional[str] = None
        self.changelog_url: Optional[str] = None

        files = entry.files
        installer = files.get("installer")
        if installer is not None and installer.extension == "jar":
            self.installer_file_name = installer.file_name(self.long_version)
            self.installer_url = installer.url(self.long_version)

        for classifier in UNIVERSAL_CLASSIFIERS:
            candidate = files.get(classifier)
            if candidate is not None and candidate.extension in UNIVERSAL_EXTENSIONS:
                self.universal_file_name = candidate.file_name(self.long_version)
                self.universal_url = candidate.url(self.long_version)
                break

        changelog = files.get("changelog")
        if changelog is not None and changelog.extension == "txt":
            self.changelog_url = changelog.url(self.long_version)

    @property
    def name(self) -> str:
        return f"Forge {self.build}"

    def uses_installer(self) -> bool:
        if self.installer_url is None:
            return False
        return self.mc_version not in Constants.NON_INSTALLER_MC_VERSIONS

    def file_name(self) -> Optional[str]:
        if self.uses_installer():
            return self.installer_file_name
        return self.universal_file_name

    def url(self) -> Optional[str]:
        if self.uses_installer():
            return self.installer_url
        return self.universal_url

    def is_supported(self) -> bool:
        """A chosen file exists and the version starts with a numeric component."""
        if self.url() is None:
            return False
        major = self.raw_version.split(".")[0]
        try:
            int(major)
        except ValueError:
            return False
        return True
