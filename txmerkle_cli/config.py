"""
CLI Configuration

Resolves the RuntimeConfig for a CLI invocation. Precedence, lowest first:
defaults, config file, TXMERKLE_* environment variables, command-line flags.
"""

from __future__ import annotations

from pathlib import Path

from txmerkle.config.runtime import LoggingConfig, RuntimeConfig, TreeConfig


def default_config_paths() -> list[Path]:
    """Locations searched when no --config is given."""
    return [
        Path.cwd() / "txmerkle.yaml",
        Path.cwd() / ".txmerkle.yaml",
        Path.home() / ".config" / "txmerkle" / "config.yaml",
    ]


def load_config(
    config_path: Path | None = None,
    *,
    hash_algorithm: str | None = None,
    odd_level_policy: str | None = None,
    log_level: str | None = None,
) -> RuntimeConfig:
    """
    Load configuration from file and/or environment, then apply flags.

    Args:
        config_path: Explicit YAML config file; must exist if given
        hash_algorithm: --hash override
        odd_level_policy: --policy override
        log_level: --log-level override

    Returns:
        Merged configuration

    Raises:
        ConfigurationException: On a missing/invalid file or bad values
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    config = config.with_env_overrides()

    if hash_algorithm or odd_level_policy:
        config.tree = TreeConfig(
            hash_algorithm=hash_algorithm or config.tree.hash_algorithm,
            odd_level_policy=odd_level_policy or config.tree.odd_level_policy,
        )
    if log_level:
        config.logging = LoggingConfig(level=log_level, file=config.logging.file)

    return config


def get_default_config_template() -> str:
    """Template YAML configuration file."""
    return """\
# txmerkle configuration
tree:
  # keccak256 (Solidity-compatible) or sha256
  hash_algorithm: keccak256
  # duplicate: pair a trailing odd node with itself
  # drop: leave it out of the next level (legacy contract behaviour)
  odd_level_policy: duplicate

logging:
  level: INFO
  file: null
"""
