"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from treecache.core.config.models import CacheConfig

logger = logging.getLogger(__name__)

# Overrides `root` from any config file
ROOT_ENV_VAR = "TREECACHE_ROOT"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("cache.json")
        'json'
        >>> detect_format("cache.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_cache_config(path: str | Path | None = None) -> CacheConfig:
    """Load and validate cache configuration.

    Missing files fall back to defaults. The TREECACHE_ROOT environment
    variable, when set, overrides `root`.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated CacheConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        raw = load_config(path)
    elif path is not None:
        logger.debug("Config file %s not found, using defaults", path)

    env_root = os.getenv(ROOT_ENV_VAR)
    if env_root:
        raw["root"] = env_root

    return CacheConfig.model_validate(raw)
