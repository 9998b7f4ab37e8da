"""Tests for installer-profile generation resolution."""

import copy

import pytest

from errors import UnparseableInstallerProfile, UnsupportedFormatVersion
from models.ceilings import VersionCeilings
from models.installer import InstallerProfileV1, InstallerProfileV1_5, InstallerProfileV2
from resolvers.installer_profile import resolve_installer_profile

V1_PROFILE = {
    "install": {
        "profileName": "Forge",
        "target": "1.7.10-Forge10.13.4.1614-1.7.10",
        "path": "net.minecraftforge:forge:1.7.10-10.13.4.1614-1.7.10",
        "version": "forge 1.7.10-10.13.4.1614-1.7.10",
        "filePath": "forge-1.7.10-10.13.4.1614-1.7.10-universal.jar",
        "welcome": "Welcome to the simple Forge installer.",
        "minecraft": "1.7.10",
        "logo": "/big_logo.png",
        "mirrorList": "http://files.minecraftforge.net/mirror-brand.list",
    },
    "versionInfo": {
        "id": "1.7.10-Forge10.13.4.1614-1.7.10",
        "mainClass": "net.minecraft.launchwrapper.Launch",
        "libraries": [{"name": "net.minecraft:launchwrapper:1.12"}],
    },
}

V2_PROFILE = {
    "_comment": ["Please do not automate the download and installation of Forge."],
    "spec": 0,
    "profile": "forge",
    "version": "1.20.1-forge-47.1.0",
    "path": None,
    "minecraft": "1.20.1",
    "json": "/version.json",
    "logo": "/big_logo.png",
    "welcome": "Welcome to the simple Forge installer.",
    "mirrorList": "https://files.minecraftforge.net/mirrors-2.0.json",
    "data": {
        "MAPPINGS": {
            "client": "[de.oceanlabs.mcp:mcp_config:1.20.1-20230612.114412:mappings@txt]",
            "server": "[de.oceanlabs.mcp:mcp_config:1.20.1-20230612.114412:mappings@txt]",
        },
        "SIDE": {"client": "client", "server": "server"},
    },
    "processors": [
        {
            "sides": ["client"],
            "jar": "net.minecraftforge:installertools:1.3.0",
            "classpath": ["net.md-5:SpecialSource:1.11.0"],
            "args": ["--task", "MCP_DATA", "--key", "mappings"],
        }
    ],
    "libraries": [
        {
            "name": "net.minecraftforge:installertools:1.3.0",
            "downloads": {"artifact": {"url": "https://maven.minecraftforge.net/installertools-1.3.0.jar"}},
        }
    ],
}


def _v1_5_profile():
    profile = copy.deepcopy(V2_PROFILE)
    profile["version"] = "1.12.2-forge-14.23.5.2851"
    profile["data"] = {"MAPPINGS": "de.oceanlabs.mcp:mcp_config:1.12.2@zip"}
    return profile


def test_generation_1():
    profile = resolve_installer_profile(V1_PROFILE, "1.7.10-10.13.4.1614-1.7.10", True)
    assert isinstance(profile, InstallerProfileV1)
    assert profile.install.profile_name == "Forge"
    assert str(profile.install.path) == "net.minecraftforge:forge:1.7.10-10.13.4.1614-1.7.10"
    assert profile.version_info["mainClass"] == "net.minecraft.launchwrapper.Launch"


def test_generation_1_takes_precedence():
    payload = copy.deepcopy(V1_PROFILE)
    payload["processors"] = []
    payload["libraries"] = []
    profile = resolve_installer_profile(payload, "1.7.10-10.13.4.1614-1.7.10", True)
    assert isinstance(profile, InstallerProfileV1)


def test_generation_2():
    profile = resolve_installer_profile(V2_PROFILE, "1.20.1-47.1.0", True)
    assert isinstance(profile, InstallerProfileV2)
    assert profile.data["SIDE"] == {"client": "client", "server": "server"}
    assert str(profile.libraries[0].name) == "net.minecraftforge:installertools:1.3.0"
    assert profile.processors[0].sides == ["client"]
    assert profile.path is None


def test_generation_1_5():
    profile = resolve_installer_profile(_v1_5_profile(), "1.12.2-14.23.5.2851", True)
    assert isinstance(profile, InstallerProfileV1_5)
    assert profile.data == {"MAPPINGS": "de.oceanlabs.mcp:mcp_config:1.12.2@zip"}


def test_generation_2_to_dict():
    out = resolve_installer_profile(V2_PROFILE, "1.20.1-47.1.0", True).to_dict()
    assert out["data"] == V2_PROFILE["data"]
    assert out["mirrorList"] == V2_PROFILE["mirrorList"]
    assert out["libraries"][0]["name"] == "net.minecraftforge:installertools:1.3.0"


def test_supported_build_reports_every_generation():
    with pytest.raises(UnparseableInstallerProfile) as excinfo:
        resolve_installer_profile({"install": {"profileName": "Forge"}}, "1.12.2-14.23.5.2855", True)
    assert set(excinfo.value.errors) == {"1", "2", "1.5"}
    assert all(excinfo.value.errors.values())
    assert "1.12.2-14.23.5.2855" in str(excinfo.value)


def test_legacy_build_is_skipped(caplog):
    assert resolve_installer_profile({"something": "else"}, "1.1-1.3.4.29", False) is None
    assert "Failed to parse install_profile.json" in caplog.text


def test_bad_library_coordinate_rejects_generation():
    payload = copy.deepcopy(V2_PROFILE)
    payload["libraries"] = [{"name": "not-a-coordinate"}]
    with pytest.raises(UnparseableInstallerProfile):
        resolve_installer_profile(payload, "1.20.1-47.1.0", True)


def test_generation_1_launcher_version_ceiling():
    profile = copy.deepcopy(V1_PROFILE)
    profile["versionInfo"]["minimumLauncherVersion"] = 99
    with pytest.raises(UnsupportedFormatVersion) as excinfo:
        resolve_installer_profile(profile, "1.7.10-10.13.4.1614-1.7.10", True)
    assert excinfo.value.field == "versionInfo.minimumLauncherVersion"

    relaxed = resolve_installer_profile(
        profile, "1.7.10-10.13.4.1614-1.7.10", True, VersionCeilings(max_launcher_version=99)
    )
    assert relaxed.version_info["minimumLauncherVersion"] == 99
