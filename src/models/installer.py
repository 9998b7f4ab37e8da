"""Forge installer-profile (``install_profile.json``) generations.

Three historical shapes exist and overlap structurally, so each variant
declares its required and optional fields as an explicit Draft-07 JSON Schema.
The resolver tries them in a fixed order; see resolvers.installer_profile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from models.ceilings import DEFAULT_CEILINGS, VersionCeilings, check_ceiling
from models.coordinate import GradleSpecifier
from models.mojang import Library, parse_libraries

_COORDINATE = {"type": "string", "pattern": r"^[^:@]+:[^:@]+:[^:@]+(:[^:@]+)?(@[^:@]+)?$"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_OPT_STRING = {"type": ["string", "null"]}

_PROCESSOR = {
    "type": "object",
    "properties": {
        "jar": _OPT_STRING,
        "classpath": {"type": ["array", "null"], "items": {"type": "string"}},
        "args": {"type": ["array", "null"], "items": {"type": "string"}},
        "outputs": {"type": ["object", "null"], "additionalProperties": {"type": "string"}},
        "sides": {"type": ["array", "null"], "items": {"type": "string"}},
    },
}

_LIBRARY = {"type": "object", "required": ["name"], "properties": {"name": _COORDINATE}}

_SPEC_FIELDS = {
    "_comment": {"type": ["array", "null"], "items": {"type": "string"}},
    "spec": {"type": ["integer", "null"]},
    "profile": _OPT_STRING,
    "version": _OPT_STRING,
    "icon": _OPT_STRING,
    "json": _OPT_STRING,
    "path": {"anyOf": [_COORDINATE, {"type": "null"}]},
    "logo": _OPT_STRING,
    "minecraft": _OPT_STRING,
    "welcome": _OPT_STRING,
    "mirrorList": _OPT_STRING,
    "processors": {"type": "array", "items": _PROCESSOR},
    "libraries": {"type": "array", "items": _LIBRARY},
}


def _optional_coordinate(value: Optional[str]) -> Optional[GradleSpecifier]:
    return GradleSpecifier.parse(value) if value else None


@dataclass
class InstallSection:
    profile_name: str
    target: str
    path: GradleSpecifier
    version: str
    file_path: str
    welcome: str
    minecraft: str
    logo: str
    mirror_list: str
    mod_list: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallSection":
        return cls(
            profile_name=data["profileName"],
            target=data["target"],
            path=GradleSpecifier.parse(data["path"]),
            version=data["version"],
            file_path=data["filePath"],
            welcome=data["welcome"],
            minecraft=data["minecraft"],
            logo=data["logo"],
            mirror_list=data["mirrorList"],
            mod_list=data.get("modList"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "profileName": self.profile_name,
            "target": self.target,
            "path": str(self.path),
            "version": self.version,
            "filePath": self.file_path,
            "welcome": self.welcome,
            "minecraft": self.minecraft,
            "logo": self.logo,
            "mirrorList": self.mirror_list,
        }
        if self.mod_list is not None:
            out["modList"] = self.mod_list
        return out


@dataclass
class ProcessorSpec:
    jar: Optional[str] = None
    classpath: Optional[List[str]] = None
    args: Optional[List[str]] = None
    outputs: Optional[Dict[str, str]] = None
    sides: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessorSpec":
        return cls(
            jar=data.get("jar"),
            classpath=data.get("classpath"),
            args=data.get("args"),
            outputs=data.get("outputs"),
            sides=data.get("sides"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {"jar": self.jar, "classpath": self.classpath, "args": self.args, "outputs": self.outputs}
        if self.sides is not None:
            out["sides"] = self.sides
        return out


@dataclass
class InstallerProfileV1:
    """Generation 1: an ``install`` section plus an embedded ``versionInfo``."""
    GENERATION: ClassVar[str] = "1"
    SCHEMA: ClassVar[Dict[str, Any]] = {
        "type": "object",
        "required": ["install", "versionInfo"],
        "properties": {
            "install": {
                "type": "object",
                "required": [
                    "profileName", "target", "path", "version", "filePath",
                    "welcome", "minecraft", "logo", "mirrorList",
                ],
                "properties": {
                    "profileName": {"type": "string"},
                    "target": {"type": "string"},
                    "path": _COORDINATE,
                    "version": {"type": "string"},
                    "filePath": {"type": "string"},
                    "welcome": {"type": "string"},
                    "minecraft": {"type": "string"},
                    "logo": {"type": "string"},
                    "mirrorList": {"type": "string"},
                    "modList": _OPT_STRING,
                },
            },
            "versionInfo": {
                "type": "object",
                "properties": {"minimumLauncherVersion": {"type": ["integer", "null"]}},
            },
            "optionals": {"type": ["array", "null"], "items": {"type": "object"}},
        },
    }

    install: InstallSection
    version_info: Dict[str, Any]
    optionals: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], ceilings: VersionCeilings = DEFAULT_CEILINGS
    ) -> "InstallerProfileV1":
        check_ceiling(
            data["versionInfo"].get("minimumLauncherVersion"),
            ceilings.max_launcher_version,
            "versionInfo.minimumLauncherVersion",
        )
        return cls(
            install=InstallSection.from_dict(data["install"]),
            version_info=data["versionInfo"],
            optionals=data.get("optionals"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "install": self.install.to_dict(),
            "versionInfo": self.version_info,
            "optionals": self.optionals,
        }


@dataclass
class _SpecProfile:
    """Fields shared by the processor-based generations (2 and 1.5)."""
    comment: Optional[List[str]] = None
    spec: Optional[int] = None
    profile: Optional[str] = None
    version: Optional[str] = None
    icon: Optional[str] = None
    json: Optional[str] = None
    path: Optional[GradleSpecifier] = None
    logo: Optional[str] = None
    minecraft: Optional[str] = None
    welcome: Optional[str] = None
    mirror_list: Optional[str] = None
    processors: List[ProcessorSpec] = field(default_factory=list)
    libraries: List[Library] = field(default_factory=list)

    @staticmethod
    def _common_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "comment": data.get("_comment"),
            "spec": data.get("spec"),
            "profile": data.get("profile"),
            "version": data.get("version"),
            "icon": data.get("icon"),
            "json": data.get("json"),
            "path": _optional_coordinate(data.get("path")),
            "logo": data.get("logo"),
            "minecraft": data.get("minecraft"),
            "welcome": data.get("welcome"),
            "mirror_list": data.get("mirrorList"),
            "processors": [ProcessorSpec.from_dict(p) for p in data["processors"]],
            "libraries": parse_libraries(data["libraries"], data.get("version")) or [],
        }

    def _common_dict(self) -> Dict[str, Any]:
        out = {
            "_comment": self.comment,
            "spec": self.spec,
            "profile": self.profile,
            "version": self.version,
            "icon": self.icon,
            "json": self.json,
            "path": str(self.path) if self.path else None,
            "logo": self.logo,
            "minecraft": self.minecraft,
            "welcome": self.welcome,
            "processors": [p.to_dict() for p in self.processors],
            "libraries": [lib.to_dict() for lib in self.libraries],
        }
        if self.mirror_list is not None:
            out["mirrorList"] = self.mirror_list
        return out


@dataclass
class InstallerProfileV2(_SpecProfile):
    """Generation 2: ``data`` maps names to client/server strings; no ``install``."""
    GENERATION: ClassVar[str] = "2"
    SCHEMA: ClassVar[Dict[str, Any]] = {
        "type": "object",
        "required": ["data", "processors", "libraries"],
        "not": {"required": ["install"]},
        "properties": dict(_SPEC_FIELDS, **{
            "data": {
                "type": "object",
                "additionalProperties": {
                    "type": "object",
                    "properties": {"client": _OPT_STRING, "server": _OPT_STRING},
                    "additionalProperties": False,
                },
            },
            "serverJarPath": _OPT_STRING,
        }),
    }

    data: Dict[str, Dict[str, Optional[str]]] = field(default_factory=dict)
    server_jar_path: Optional[str] = None

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], ceilings: VersionCeilings = DEFAULT_CEILINGS
    ) -> "InstallerProfileV2":
        return cls(
            data={k: {"client": v.get("client"), "server": v.get("server")} for k, v in data["data"].items()},
            server_jar_path=data.get("serverJarPath"),
            **cls._common_kwargs(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._common_dict()
        out["data"] = self.data
        if self.server_jar_path is not None:
            out["serverJarPath"] = self.server_jar_path
        return out


@dataclass
class InstallerProfileV1_5(_SpecProfile):
    """Generation 1.5: processors and libraries with a free-form ``data`` value.

    Only ever shipped by 1.12.2-14.23.5.2851.
    """
    GENERATION: ClassVar[str] = "1.5"
    SCHEMA: ClassVar[Dict[str, Any]] = {
        "type": "object",
        "required": ["processors", "libraries"],
        "not": {"required": ["install"]},
        "properties": dict(_SPEC_FIELDS, data={}),
    }

    data: Any = None

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], ceilings: VersionCeilings = DEFAULT_CEILINGS
    ) -> "InstallerProfileV1_5":
        return cls(data=data.get("data"), **cls._common_kwargs(data))

    def to_dict(self) -> Dict[str, Any]:
        out = self._common_dict()
        out["data"] = self.data
        return out


# Resolution order matters: earlier generations win when several validate.
INSTALLER_PROFILE_GENERATIONS = (InstallerProfileV1, InstallerProfileV2, InstallerProfileV1_5)
