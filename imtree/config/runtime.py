"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from imtree.crypto.hashing import DEFAULT_ALGORITHM, from_hex, get_digest_function
from imtree.schemas.errors import TreeConfigurationException

load_dotenv()


ENV_PREFIX = "IMTREE_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class TreeConfig:
    """Construction parameters for a tree."""
    depth: int = 3
    algorithm: str = DEFAULT_ALGORITHM
    declared_root: Optional[str] = None  # 0x-prefixed hex

    def __post_init__(self):
        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 0:
            raise TreeConfigurationException(
                f"depth must be a non-negative integer, got {self.depth!r}",
                field_path="tree.depth",
            )
        # Raises TreeConfigurationException for unknown names
        get_digest_function(self.algorithm)
        if self.declared_root is not None:
            self.declared_root_bytes()

    def declared_root_bytes(self) -> bytes:
        """Declared root as bytes (empty when unset)."""
        if self.declared_root is None:
            return b""
        try:
            return from_hex(self.declared_root)
        except ValueError as e:
            raise TreeConfigurationException(
                str(e), field_path="tree.declared_root"
            ) from e


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None

    def __post_init__(self):
        self.level = str(self.level).upper()
        if self.level not in _LOG_LEVELS:
            raise TreeConfigurationException(
                f"log level must be one of {list(_LOG_LEVELS)}, got {self.level!r}",
                field_path="logging.level",
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction / dict
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - IMTREE_DEPTH: tree depth (integer)
        - IMTREE_ALGORITHM: digest algorithm name
        - IMTREE_DECLARED_ROOT: declared root digest (0x hex)
        - IMTREE_LOG_LEVEL: log level
        - IMTREE_LOG_FILE: log file path
        """
        overrides: dict[str, Any] = {}

        depth = os.getenv(f"{ENV_PREFIX}DEPTH")
        if depth:
            try:
                overrides.setdefault("tree", {})["depth"] = int(depth)
            except ValueError:
                raise TreeConfigurationException(
                    f"{ENV_PREFIX}DEPTH must be an integer, got {depth!r}",
                    field_path="tree.depth",
                ) from None
        if os.getenv(f"{ENV_PREFIX}ALGORITHM"):
            overrides.setdefault("tree", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}DECLARED_ROOT"):
            overrides.setdefault("tree", {})["declared_root"] = os.getenv(f"{ENV_PREFIX}DECLARED_ROOT")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration from defaults plus environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """
        Build a configuration from a (possibly partial) nested dict.

        Raises:
            TreeConfigurationException: On unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise TreeConfigurationException(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        tree_data = data.get("tree") or {}
        logging_data = data.get("logging") or {}

        try:
            tree = TreeConfig(**tree_data)
            log = LoggingConfig(**logging_data)
        except TypeError as e:
            raise TreeConfigurationException(f"Invalid configuration: {e}") from e

        return cls(tree=tree, logging=log, extra=data.get("extra", {}))

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        for section, values in overrides.items():
            data[section].update(values)
        return RuntimeConfig.from_dict(copy.deepcopy(data))

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "algorithm": self.tree.algorithm,
                "declared_root": self.tree.declared_root,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": dict(self.extra),
        }

    def build_tree(self):
        """Construct an empty tree from the tree section."""
        from imtree.merkle.merkle_tree import IncrementalMerkleTree

        return IncrementalMerkleTree(
            depth=self.tree.depth,
            declared_root=self.tree.declared_root_bytes(),
            algorithm=self.tree.algorithm,
        )


def get_default_config_template() -> str:
    """YAML template written by `imtree config --init`."""
    return """\
tree:
  depth: 3
  algorithm: sha256
  # 0x-prefixed hex digest the filled tree is expected to reach
  declared_root: null
logging:
  level: INFO
  file: null
"""
