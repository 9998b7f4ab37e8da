"""Gradle-style artifact coordinates: ``group:artifact:version[:classifier][@ext]``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from errors import MalformedCoordinate

DEFAULT_EXTENSION = "jar"

LWJGL_GROUPS = frozenset({
    "org.lwjgl",
    "org.lwjgl.lwjgl",
    "net.java.jinput",
    "net.java.jutils",
})
LOG4J_GROUPS = frozenset({"org.apache.logging.log4j"})


@dataclass(frozen=True)
class GradleSpecifier:
    """A parsed artifact coordinate.

    ``str()`` renders the canonical text form, which omits the extension when
    it is the default ``jar`` and omits the classifier when absent.
    """

    group: str
    artifact: str
    version: str
    extension: str = DEFAULT_EXTENSION
    classifier: Optional[str] = None

    def __post_init__(self):
        for field_name in ("group", "artifact", "version"):
            if not getattr(self, field_name):
                raise MalformedCoordinate(self.format(), f"{field_name} is empty")

    @classmethod
    def parse(cls, text: str) -> "GradleSpecifier":
        """Parse the coordinate text form.

        Raises:
            MalformedCoordinate: On fewer than 3 or more than 4 segments, empty
                segments, or a malformed ``@extension`` suffix.
        """
        if not isinstance(text, str):
            raise MalformedCoordinate(repr(text), "not a string")
        coordinate, at, extension = text.partition("@")
        if at:
            if not extension:
                raise MalformedCoordinate(text, "empty extension")
            if "@" in extension:
                raise MalformedCoordinate(text, "more than one '@'")
        else:
            extension = DEFAULT_EXTENSION

        components = coordinate.split(":")
        if len(components) < 3:
            raise MalformedCoordinate(text)
        if len(components) > 4:
            raise MalformedCoordinate(text, "too many ':'-separated segments")
        group, artifact, version = components[:3]
        classifier = components[3] if len(components) == 4 else None
        if classifier == "":
            raise MalformedCoordinate(text, "classifier is empty")
        if not (group and artifact and version):
            raise MalformedCoordinate(text, "group, artifact and version must be non-empty")
        return cls(group, artifact, version, extension, classifier)

    def format(self) -> str:
        text = f"{self.group}:{self.artifact}:{self.version}"
        if self.classifier is not None:
            text += f":{self.classifier}"
        if self.extension != DEFAULT_EXTENSION:
            text += f"@{self.extension}"
        return text

    def __str__(self) -> str:
        return self.format()

    @property
    def base_path(self) -> str:
        """``group/with/slashes/artifact/version``"""
        return f"{self.group.replace('.', '/')}/{self.artifact}/{self.version}"

    @property
    def file_name(self) -> str:
        if self.classifier is not None:
            return f"{self.artifact}-{self.version}-{self.classifier}.{self.extension}"
        return f"{self.artifact}-{self.version}.{self.extension}"

    @property
    def full_path(self) -> str:
        return f"{self.base_path}/{self.file_name}"

    @property
    def is_lwjgl(self) -> bool:
        return self.group in LWJGL_GROUPS

    @property
    def is_log4j(self) -> bool:
        return self.group in LOG4J_GROUPS
