"""Tests for the JSON persistence helpers."""

import hashlib

from common import storage


def test_write_json_matches_dumps(tmp_path):
    path = tmp_path / "nested" / "out.json"
    data = {"name": "Minecraft", "uid": "net.minecraft", "note": "ünïcode"}
    storage.write_json(str(path), data)
    assert path.read_text(encoding="utf-8") == storage.dumps_json(data)
    assert storage.read_json(str(path)) == data
    assert not (tmp_path / "nested" / "out.json.tmp").exists()


def test_file_digest(tmp_path):
    path = tmp_path / "installer.jar"
    storage.write_bytes(str(path), b"PK\x03\x04")
    assert storage.file_digest(str(path), "sha1") == hashlib.sha1(b"PK\x03\x04").hexdigest()


def test_ensure_dirs(tmp_path):
    storage.ensure_dirs(str(tmp_path / "forge"), ["jars", "installer_info"])
    assert (tmp_path / "forge" / "jars").is_dir()
    assert (tmp_path / "forge" / "installer_info").is_dir()
