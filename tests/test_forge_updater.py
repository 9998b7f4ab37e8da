"""Tests for the Forge mirror updater."""

import io
import json
import zipfile
from unittest.mock import patch

import pytest

from cli_config import MetaConfig
from constants import Constants
from errors import DataIntegrityFault, UnparseableInstallerProfile, UnparseableMetadata
from updaters.forge import ForgeUpdater

HASH = "0123456789abcdef0123456789abcdef"
LONG_VERSION = "1.12.2-14.23.5.2855"

V2_PROFILE = {
    "spec": 0,
    "version": "1.12.2-forge-14.23.5.2855",
    "minecraft": "1.12.2",
    "data": {"SIDE": {"client": "client", "server": "server"}},
    "processors": [],
    "libraries": [{"name": "net.minecraftforge:forge:1.12.2-14.23.5.2855"}],
}


def _installer(profile=V2_PROFILE, version_json=None):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        if profile is not None:
            archive.writestr("install_profile.json", json.dumps(profile))
        if version_json is not None:
            archive.writestr("version.json", json.dumps(version_json))
    return buffer.getvalue()


def _documents(builds):
    documents = {
        Constants.FORGE_MAVEN_METADATA_URL: builds,
        Constants.FORGE_PROMOTIONS_URL: {"promos": {"1.12.2-recommended": "14.23.5.2855"}},
    }
    for long_versions in builds.values():
        for long_version in long_versions:
            documents[Constants.FORGE_FILE_MANIFEST_URL.format(long_version=long_version)] = {
                "classifiers": {"installer": {"jar": HASH}, "universal": {"jar": HASH}}
            }
    return documents


def _run(tmp_path, documents, jar_bytes):
    def fetch_json(url, *, context):
        return documents[url]

    updater = ForgeUpdater(MetaConfig(upstream_dir=str(tmp_path)))
    with patch("updaters.forge.http_client.fetch_json", side_effect=fetch_json) as mock_json, \
            patch("updaters.forge.http_client.fetch_bytes", return_value=jar_bytes) as mock_bytes:
        index = updater.run()
    return index, mock_json, mock_bytes


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_full_run(tmp_path):
    version_json = {"id": "1.12.2-forge-14.23.5.2855", "mainClass": "net.minecraft.launchwrapper.Launch"}
    index, _, mock_bytes = _run(tmp_path, _documents({"1.12.2": [LONG_VERSION]}), _installer(version_json=version_json))

    assert index.mc_versions["1.12.2"].recommended == LONG_VERSION
    base = tmp_path / "forge"
    derived = _read(base / "derived_index.json")
    assert derived["mc_versions"]["1.12.2"]["latest"] == LONG_VERSION
    assert _read(base / "promotions_slim.json")["promos"]["1.12.2-recommended"] == "14.23.5.2855"
    assert (base / "files_manifests" / f"{LONG_VERSION}.json").exists()

    profile = _read(base / "installer_manifests" / f"{LONG_VERSION}.json")
    assert profile["data"] == V2_PROFILE["data"]
    assert _read(base / "version_manifests" / f"{LONG_VERSION}.json")["mainClass"] == "net.minecraft.launchwrapper.Launch"

    info = _read(base / "installer_info" / f"{LONG_VERSION}.json")
    assert set(info) == {"sha1hash", "sha256hash", "size"}
    assert info["size"] == len(mock_bytes.return_value)
    mock_bytes.assert_called_once()


def test_cached_files_manifest_is_reused(tmp_path):
    cache = tmp_path / "forge" / "files_manifests"
    cache.mkdir(parents=True)
    (cache / f"{LONG_VERSION}.json").write_text(
        json.dumps({"classifiers": {"universal": {"jar": HASH}}}), encoding="utf-8"
    )
    documents = _documents({"1.12.2": [LONG_VERSION]})
    del documents[Constants.FORGE_FILE_MANIFEST_URL.format(long_version=LONG_VERSION)]

    index, _, mock_bytes = _run(tmp_path, documents, b"")
    assert set(index.versions[LONG_VERSION].files) == {"universal"}
    mock_bytes.assert_not_called()


def test_second_run_skips_download(tmp_path):
    documents = _documents({"1.12.2": [LONG_VERSION]})
    _run(tmp_path, documents, _installer())
    _, _, mock_bytes = _run(tmp_path, documents, _installer())
    mock_bytes.assert_not_called()


def test_resolution_failure_writes_no_index(tmp_path):
    documents = _documents({"1.12.2": [LONG_VERSION, "1.12.1-14.22.1.2478"]})
    with pytest.raises(DataIntegrityFault):
        _run(tmp_path, documents, _installer())
    assert not (tmp_path / "forge" / "derived_index.json").exists()


def test_supported_build_with_unknown_profile(tmp_path):
    with pytest.raises(UnparseableInstallerProfile):
        _run(tmp_path, _documents({"1.12.2": [LONG_VERSION]}), _installer(profile={"unknown": True}))


def test_supported_build_without_profile(tmp_path):
    with pytest.raises(UnparseableInstallerProfile):
        _run(tmp_path, _documents({"1.12.2": [LONG_VERSION]}), _installer(profile=None))


def test_corrupt_installer(tmp_path):
    with pytest.raises(UnparseableMetadata):
        _run(tmp_path, _documents({"1.12.2": [LONG_VERSION]}), b"not a zip")


def test_unreadable_version_json_is_skipped(tmp_path, caplog):
    _run(tmp_path, _documents({"1.12.2": [LONG_VERSION]}), _installer(version_json=["not", "an", "object"]))
    assert not (tmp_path / "forge" / "version_manifests" / f"{LONG_VERSION}.json").exists()
    assert (tmp_path / "forge" / "installer_manifests" / f"{LONG_VERSION}.json").exists()
    assert "Failed to parse version.json" in caplog.text
