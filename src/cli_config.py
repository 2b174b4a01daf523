"""Configuration file loading.

A configuration file is YAML::

    cache_dir: ~/.pkgfetch/packages
    timeout: 30
    repos:
      - name: hackage.haskell.org
        url: http://hackage.haskell.org/packages/archive
    installed:
      - base-3.0

CLI options are applied afterwards by ``FetchConfig.from_args`` and win.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from fetch.models import FetchConfig
from repository.models import Repository
from versioning.parser import parse_package_id

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be understood."""


def _read_yaml(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")
    return data


def config_from_dict(data: Dict[str, Any]) -> FetchConfig:
    """Build a ``FetchConfig`` from already-parsed configuration data."""
    config = FetchConfig()

    if data.get("cache_dir"):
        config.cache_dir = str(data["cache_dir"])

    if "timeout" in data:
        try:
            config.timeout = float(data["timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"timeout must be a number, got {data['timeout']!r}") from exc

    repos = data.get("repos")
    if repos is not None:
        if not isinstance(repos, list):
            raise ConfigError("repos must be a list of {name, url} entries")
        parsed = []
        for entry in repos:
            if not isinstance(entry, dict) or not entry.get("name") or not entry.get("url"):
                raise ConfigError(f"Invalid repository entry: {entry!r}")
            parsed.append(Repository(name=str(entry["name"]), url=str(entry["url"])))
        config.repos = parsed

    installed = data.get("installed") or []
    try:
        config.installed = [parse_package_id(str(item)) for item in installed]
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    return config


def load_config(config_path: Optional[str]) -> FetchConfig:
    """Load configuration from ``config_path``; defaults when absent.

    Raises:
        ConfigError: the file exists but is malformed.
    """
    if not config_path:
        return FetchConfig()

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return FetchConfig()

    config = config_from_dict(_read_yaml(config_path))
    logger.debug("Loaded config from: %s", config_path)
    return config
