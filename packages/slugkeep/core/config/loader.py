"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from slugkeep.core.config.models import BuildConfig, CustomBuildConfig

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("slugkeep.json")
        'json'
        >>> detect_format("build.yml")
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
        Raw configuration dictionary (empty for an empty YAML file)

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


def load_build_config(
    path: str | Path | None = None, build_dir: Path | None = None
) -> BuildConfig:
    """Load and validate slugkeep configuration.

    Args:
        path: Explicit config file path; when None, ``slugkeep.yml`` in
              build_dir is used if present, defaults otherwise

    Returns:
        Validated BuildConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    config = BuildConfig.load_or_default(path, build_dir=build_dir)
    logger.debug(f"Build config loaded: {config.model_dump()}")
    return config


def load_custom_build_config(build_dir: Path) -> CustomBuildConfig:
    """Load the optional ``build.yml`` from the build directory.

    Returns:
        CustomBuildConfig, empty when no file is present
    """
    return CustomBuildConfig.load_or_default(build_dir=build_dir)
