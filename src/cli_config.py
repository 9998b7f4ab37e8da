"""Runtime configuration: config file loading and CLI overrides.

Extracted from the entrypoint to keep it slim. Precedence is CLI flags, then
the config file, then built-in defaults. HTTP tunables are applied to
``Constants`` (they are process-wide); directories and version ceilings are
returned in an explicit MetaConfig that callers pass down.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from models.ceilings import VersionCeilings

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be read or is malformed."""


@dataclass
class MetaConfig:
    """Resolved settings for one run."""
    upstream_dir: str = Constants.DEFAULT_UPSTREAM_DIR
    launcher_dir: str = Constants.DEFAULT_LAUNCHER_DIR
    static_dir: str = Constants.DEFAULT_STATIC_DIR
    ceilings: VersionCeilings = field(default_factory=VersionCeilings)


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML (.yml/.yaml) or JSON config file into a dict."""
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def _int_setting(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Config value '{key}' must be an integer, got {value!r}")
    return value


def apply_http_overrides(http: Dict[str, Any]) -> None:
    """Apply HTTP tunables (timeout, retries, cache TTL) to Constants."""
    if "timeout" in http:
        Constants.REQUEST_TIMEOUT = _int_setting(http, "timeout", Constants.REQUEST_TIMEOUT)
    if "retries" in http:
        Constants.HTTP_RETRY_MAX = max(1, _int_setting(http, "retries", Constants.HTTP_RETRY_MAX))
    if "cache_ttl" in http:
        Constants.HTTP_CACHE_TTL_SEC = _int_setting(http, "cache_ttl", Constants.HTTP_CACHE_TTL_SEC)


def build_config(args: Any = None, data: Optional[Dict[str, Any]] = None) -> MetaConfig:
    """Merge config-file data and parsed CLI args into a MetaConfig.

    Args:
        args: argparse namespace (attributes UPSTREAM_DIR, LAUNCHER_DIR, STATIC_DIR may be None).
        data: Parsed config file contents; loaded from ``args.CONFIG`` when omitted.
    """
    if data is None:
        config_path = getattr(args, "CONFIG", None)
        data = load_config_file(config_path) if config_path else {}

    ceilings_section = data.get("ceilings") or {}
    defaults = VersionCeilings()
    ceilings = VersionCeilings(
        max_launcher_version=_int_setting(ceilings_section, "max_launcher_version", defaults.max_launcher_version),
        format_version=_int_setting(ceilings_section, "format_version", defaults.format_version),
    )
    apply_http_overrides(data.get("http") or {})

    config = MetaConfig(
        upstream_dir=data.get("upstream_dir", Constants.DEFAULT_UPSTREAM_DIR),
        launcher_dir=data.get("launcher_dir", Constants.DEFAULT_LAUNCHER_DIR),
        static_dir=data.get("static_dir", Constants.DEFAULT_STATIC_DIR),
        ceilings=ceilings,
    )
    for attr, arg_name in (("upstream_dir", "UPSTREAM_DIR"), ("launcher_dir", "LAUNCHER_DIR"), ("static_dir", "STATIC_DIR")):
        value = getattr(args, arg_name, None)
        if value:
            setattr(config, attr, value)

    logger.debug("Resolved configuration: %s", config)
    return config
