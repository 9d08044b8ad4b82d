"""Configuration for the vault CLI.

Supports:
- Built-in defaults
- User overrides from filevault.yaml in the working directory
- Environment variable overrides (FILEVAULT_*)
- Nested key access with dot notation
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

__all__ = ["ConfigError", "Config", "DEFAULT_CONFIG", "load_config"]

DEFAULT_CONFIG_FILE = "filevault.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "vault": {
        "container": "vault.vault",
    },
    "logging": {
        "level": "ERROR",
        "file": None,
    },
}

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

ENV_MAPPINGS = {
    "FILEVAULT_CONTAINER": "vault.container",
    "FILEVAULT_LOG_LEVEL": "logging.level",
    "FILEVAULT_LOG_FILE": "logging.file",
}


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


class Config:
    """Layered configuration.

    Configuration priority (highest to lowest):
    1. Environment variables (FILEVAULT_*)
    2. User config (filevault.yaml)
    3. Built-in defaults

    Example:
        >>> config = Config.load()
        >>> config.get("vault.container")
        'vault.vault'
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> Config:
        """Load configuration from file and environment.

        Parameters
        ----------
        config_path
            Path to user config file (default: $FILEVAULT_CONFIG or filevault.yaml)

        Returns
        -------
        Config
            Loaded configuration instance

        Raises
        ------
        ConfigError
            If the config file exists but is not a valid YAML mapping
        """
        if config_path is None:
            config_path = os.environ.get("FILEVAULT_CONFIG", DEFAULT_CONFIG_FILE)

        user_config = cls._load_yaml_file(config_path) if Path(config_path).exists() else {}

        merged = cls._deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)
        merged = cls._apply_env_overrides(merged)

        return cls(merged)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key, e.g. ``"logging.level"``."""
        parts = key.split(".")
        value = self._data

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    @property
    def container_path(self) -> Path:
        """Container file location, relative paths resolved against the cwd."""
        return Path(self.get("vault.container", "vault.vault"))

    @property
    def log_level(self) -> str:
        level = str(self.get("logging.level", "ERROR")).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Invalid logging.level {level!r}, expected one of: {', '.join(LOG_LEVELS)}")
        return level

    @property
    def log_file(self) -> Path | None:
        value = self.get("logging.file")
        return Path(value) if value else None

    @staticmethod
    def _load_yaml_file(path: str | Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to load config from {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

        return data

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
        """Apply FILEVAULT_* environment variables on top of ``config``.

        Example: FILEVAULT_LOG_LEVEL=DEBUG overrides config["logging"]["level"]
        """
        result = config.copy()

        for env_var, config_key in ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is None:
                continue

            parts = config_key.split(".")
            data = result
            for part in parts[:-1]:
                if not isinstance(data.get(part), dict):
                    data[part] = {}
                data = data[part]
            data[parts[-1]] = value

        return result


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration (see :meth:`Config.load`)."""
    return Config.load(config_path=config_path)
