"""Loaders whose metadata needs no reconciliation: mirrored verbatim."""
from __future__ import annotations

import logging
import os
from typing import Dict, List

from cli_config import MetaConfig
from common import http_client, storage
from constants import Constants, Sources

logger = logging.getLogger(__name__)


def _mirror(documents: Dict[str, str], base_dir: str, context: str) -> List[str]:
    """Fetch every url in ``documents`` (relative path -> url), then write them all."""
    fetched = {}
    for rel_path, url in documents.items():
        logger.info("Downloading %s index %s...", context, rel_path)
        fetched[rel_path] = http_client.fetch_json(url, context=context)
    for rel_path, payload in fetched.items():
        storage.write_json(os.path.join(base_dir, rel_path), payload)
    return list(fetched)


def update_liteloader(config: MetaConfig) -> List[str]:
    """Mirror the LiteLoader versions.json."""
    documents = {"versions.json": Constants.LITELOADER_URL}
    return _mirror(documents, os.path.join(config.upstream_dir, Sources.LITELOADER.value), "liteloader")
