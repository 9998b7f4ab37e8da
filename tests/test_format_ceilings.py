"""Tests for the format-version ceilings on the read and write paths."""

import pytest

from errors import UnparseableMetadata, UnsupportedFormatVersion
from models.ceilings import VersionCeilings, check_ceiling
from models.launcher import LauncherPackage, LauncherVersionFile
from models.mojang import MojangVersionFile


def test_check_ceiling_passes_values_at_or_below():
    assert check_ceiling(None, 1, "formatVersion") is None
    assert check_ceiling(1, 1, "formatVersion") == 1


def test_check_ceiling_rejects_above():
    with pytest.raises(UnsupportedFormatVersion) as excinfo:
        check_ceiling(2, 1, "formatVersion")
    assert excinfo.value.got == 2
    assert excinfo.value.max == 1
    assert excinfo.value.field == "formatVersion"


@pytest.mark.parametrize("value", ["1", 1.0, True])
def test_check_ceiling_rejects_non_integers(value):
    with pytest.raises(UnparseableMetadata):
        check_ceiling(value, 1, "formatVersion")


def test_minimum_launcher_version_read_path():
    with pytest.raises(UnsupportedFormatVersion):
        MojangVersionFile.from_dict({"id": "future", "minimumLauncherVersion": 22})


def test_minimum_launcher_version_custom_ceiling():
    ceilings = VersionCeilings(max_launcher_version=30)
    parsed = MojangVersionFile.from_dict({"id": "future", "minimumLauncherVersion": 22}, ceilings)
    assert parsed.minimum_launcher_version == 22
    with pytest.raises(UnsupportedFormatVersion):
        parsed.to_dict()
    assert parsed.to_dict(ceilings)["minimumLauncherVersion"] == 22


def test_format_version_read_path():
    payload = {"formatVersion": 2, "name": "Minecraft", "version": "1.20.1", "uid": "net.minecraft"}
    with pytest.raises(UnsupportedFormatVersion):
        LauncherVersionFile.from_dict(payload)
    parsed = LauncherVersionFile.from_dict(payload, VersionCeilings(format_version=2))
    assert parsed.format_version == 2


def test_format_version_write_path():
    version_file = LauncherVersionFile(name="Minecraft", version="1.20.1", uid="net.minecraft", format_version=2)
    with pytest.raises(UnsupportedFormatVersion):
        version_file.to_dict()
    package = LauncherPackage(name="Minecraft", uid="net.minecraft", format_version=2)
    with pytest.raises(UnsupportedFormatVersion):
        package.to_dict(VersionCeilings(format_version=1))


def test_missing_format_version_defaults_to_current():
    payload = {"name": "Minecraft", "version": "1.20.1", "uid": "net.minecraft"}
    parsed = LauncherVersionFile.from_dict(payload, VersionCeilings(format_version=3))
    assert parsed.format_version == 1
    assert parsed.to_dict()["formatVersion"] == 1
