"""Persistence helpers: directory bootstrap and JSON read/write.

Updaters build their whole result in memory and call these only once a run
has succeeded, so a failed run never leaves a partially written index.
"""
from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Any, Iterable

logger = logging.getLogger(__name__)


def ensure_dirs(base: str, subdirs: Iterable[str]) -> None:
    """Create ``base/<subdir>`` for every subdir (parents included)."""
    for sub in subdirs:
        os.makedirs(os.path.join(base, sub), exist_ok=True)


def dumps_json(data: Any) -> str:
    """Serialize ``data`` exactly as write_json stores it."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_text(path: str, text: str) -> None:
    """Atomically write ``text`` as UTF-8, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as fh:
        fh.write(text)
    os.replace(tmp_path, path)
    logger.debug("Wrote %s", path)


def write_json(path: str, data: Any) -> None:
    """Write ``data`` as pretty-printed UTF-8 JSON, creating parent directories."""
    write_text(path, dumps_json(data))


def read_json(path: str) -> Any:
    """Load a JSON document from disk."""
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def write_bytes(path: str, data: bytes) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(data)


def file_digest(path: str, algorithm: str) -> str:
    """Hex digest of a file's contents (``sha1``, ``sha256``, ...)."""
    digest = hashlib.new(algorithm)
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()

