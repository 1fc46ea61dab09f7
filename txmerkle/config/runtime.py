"""
Runtime Configuration

Central configuration for tree construction, verification and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from txmerkle.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFunction, get_hash_function
from txmerkle.merkle.tree_builder import OddLevelPolicy
from txmerkle.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "TXMERKLE_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TreeConfig:
    """Hash algorithm and odd-level policy shared by builder and verifier."""
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    odd_level_policy: str = OddLevelPolicy.DUPLICATE.value

    def __post_init__(self):
        # Fail at load time rather than on the first build
        get_hash_function(self.hash_algorithm)
        self.hash_algorithm = self.hash_algorithm.strip().lower()
        self.odd_level_policy = OddLevelPolicy.parse(self.odd_level_policy).value

    @property
    def hash_function(self) -> HashFunction:
        return get_hash_function(self.hash_algorithm)

    @property
    def policy(self) -> OddLevelPolicy:
        return OddLevelPolicy.parse(self.odd_level_policy)


@dataclass
class LoggingConfig:
    """Configuration for CLI logging."""
    level: str = "INFO"
    file: Optional[str] = None

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationException(
                f"Unknown log level: {self.level!r}",
                setting="logging.level",
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - TXMERKLE_HASH_ALGORITHM: keccak256 or sha256
        - TXMERKLE_ODD_LEVEL_POLICY: duplicate or drop
        - TXMERKLE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
        - TXMERKLE_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}ODD_LEVEL_POLICY"):
            overrides.setdefault("tree", {})["odd_level_policy"] = os.getenv(f"{ENV_PREFIX}ODD_LEVEL_POLICY")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise ConfigurationException(f"Config file not found: {path}", setting="config")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationException(f"Invalid YAML in {path}: {e}", setting="config") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file {path} must contain a mapping at the top level",
                setting="config",
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree") or {}
        logging_data = data.get("logging") or {}

        try:
            tree = TreeConfig(**tree_data)
            log = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationException(f"Unknown configuration key: {e}", setting="config") from e

        return cls(tree=tree, logging=log)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        tree_data = {**self.to_dict()["tree"], **overrides.get("tree", {})}
        logging_data = {**self.to_dict()["logging"], **overrides.get("logging", {})}
        new_config.tree = TreeConfig(**tree_data)
        new_config.logging = LoggingConfig(**logging_data)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
                "odd_level_policy": self.tree.odd_level_policy,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env defaults)."""
    global _default_config
    _default_config = config
