"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Supports YAML or JSON files plus IMTREE_* environment variables.
"""

from __future__ import annotations

import json
from pathlib import Path

from imtree.config import RuntimeConfig
from imtree.schemas.errors import TreeConfigurationException


DEFAULT_CONFIG_NAME = "imtree.yaml"


def default_config_paths() -> list[Path]:
    """Locations searched when no --config is given, in order."""
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.cwd() / ".imtree.yaml",
        Path.home() / ".config" / "imtree" / "config.yaml",
    ]


def load_config_from_file(path: Path) -> RuntimeConfig:
    """Load configuration from a YAML or JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix == ".json":
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise TreeConfigurationException(
                    f"Config file is not valid JSON: {e}",
                    details={"path": str(path)},
                ) from e
        return RuntimeConfig.from_dict(data)

    return RuntimeConfig.from_yaml(path)


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return config.with_env_overrides()
