"""Configuration loading with environment overrides and lazy section access.

Configuration is read from ~/.config/postdesk/config.yaml. Environment
variables with the POSTDESK_ prefix override file values:

- POSTDESK_SCHEMA_PATH: Override storage.schema_path
- POSTDESK_STORE_PATH: Override storage.store_path
- POSTDESK_LOG_LEVEL: Override logging.level
- POSTDESK_LOG_FILE: Override logging.log_file
"""

import os
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from postdesk.models.config import Config, LoggingConfig, StorageConfig
from postdesk.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "postdesk" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. If None, uses ~/.config/postdesk/config.yaml

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If there is no config file and no POSTDESK_* variables
        ValueError: If the configuration is invalid
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    data = _apply_env_overrides(data)

    if not data["storage"]:
        raise FileNotFoundError(
            f"No configuration at {config_path} and no POSTDESK_* environment variables set.\n\n"
            f"Create the file with the following format:\n\n"
            f"storage:\n"
            f"  schema_path: ~/.config/postdesk/schema.yaml\n"
            f"  store_path: ~/.local/share/postdesk/posts.json\n\n"
            f"logging:\n"
            f"  level: INFO\n\n"
            f"or set POSTDESK_SCHEMA_PATH and POSTDESK_STORE_PATH."
        )

    return Config(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    data.setdefault("storage", {})
    data.setdefault("logging", {})

    if env_schema := os.getenv("POSTDESK_SCHEMA_PATH"):
        data["storage"]["schema_path"] = env_schema

    if env_store := os.getenv("POSTDESK_STORE_PATH"):
        data["storage"]["store_path"] = env_store

    if env_level := os.getenv("POSTDESK_LOG_LEVEL"):
        data["logging"]["level"] = env_level

    if env_log_file := os.getenv("POSTDESK_LOG_FILE"):
        data["logging"]["log_file"] = env_log_file

    return data


class ConfigManager:
    """
    Loaded configuration, split into the sections the CLI wires up.

    Files are optional: POSTDESK_* variables are applied on top of whatever
    file exists, so a manager can be built from the environment alone.

    Example:
        >>> config_mgr = ConfigManager.load_default()
        >>> registry = SchemaRegistry.from_yaml(Path(config_mgr.storage.schema_path))
    """

    def __init__(self, config: Config):
        self._config = config

    @classmethod
    def load_default(cls) -> "ConfigManager":
        """
        Load ~/.config/postdesk/config.yaml (if present) plus POSTDESK_* overrides.

        Raises:
            FileNotFoundError: If neither the file nor POSTDESK_SCHEMA_PATH /
                POSTDESK_STORE_PATH provide a storage section
            ValueError: If the merged configuration is invalid
        """
        return cls.load_from_path(DEFAULT_CONFIG_PATH)

    @classmethod
    def load_from_path(cls, path: Path) -> "ConfigManager":
        """
        Load a config file (if present) plus POSTDESK_* overrides.

        Validation errors, including a schema file that doesn't exist, are
        reported as ValueError so the CLI can print them and exit.

        Raises:
            FileNotFoundError: If no storage settings are available
            ValueError: If the merged configuration is invalid
        """
        logger.info("config_loading", path=str(path), file_exists=path.exists())

        try:
            config = load_config(path)
        except FileNotFoundError as e:
            logger.error("config_not_found", path=str(path), error=str(e))
            raise
        except Exception as e:
            logger.error("config_validation_error", path=str(path), error=str(e))
            raise ValueError(f"Configuration validation failed: {e}") from e

        logger.info(
            "config_loaded",
            schema_path=config.storage.schema_path,
            store_path=config.storage.store_path,
        )
        return cls(config)

    @cached_property
    def storage(self) -> StorageConfig:
        """Schema file and post store locations (after env overrides)."""
        return self._config.storage

    @cached_property
    def logging(self) -> LoggingConfig:
        """Log level and file; defaults when the section is absent."""
        return self._config.logging
