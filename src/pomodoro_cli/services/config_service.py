"""Configuration service for managing Pomodoro CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and validating config.json (missing file means defaults)
- Saving config.json with owner-only permissions
- Dot-separated get/set/reset of individual keys
- Resolving the session state file location
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from pomodoro_cli.models.config_models import AppConfig, validate_config
from pomodoro_cli.models.timer.exceptions import ConfigValidationError
from pomodoro_cli.models.timer.persistence import STATE_FILE_NAME

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading, validating and saving application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("pomodoro_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("pomodoro_cli"))

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def state_file(self) -> Path:
        """Path of the persisted session state."""
        configured = self.config.storage.state_file
        if configured:
            return Path(configured).expanduser()
        return self.data_dir / "state" / STATE_FILE_NAME

    def load_config(self) -> AppConfig:
        """Load configuration from storage.

        Raises:
            ConfigValidationError: If the file exists but is not a valid config.
        """
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            return self._config
        except (JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigValidationError([f"{self.config_path.name}: {e}"]) from e

        result = validate_config(raw)
        if not result.ok:
            logger.warning("invalid configuration in %s: %s", self.config_path, result.errors)
            raise ConfigValidationError(result.errors)

        self._config = result.config
        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))

            # Set file permissions
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist.
        """
        value = _get_from(self.config, key)
        if isinstance(value, BaseModel):
            return value.model_dump()
        return value

    def set(self, key: str, value: Any) -> AppConfig:
        """Set a configuration value by dot-separated key, validating first.

        Raises:
            KeyError: If the key does not exist.
            ConfigValidationError: If the new value is invalid.
        """
        current = self.get(key)
        if isinstance(current, dict):
            raise KeyError(key)

        config_dict = self.config.model_dump()
        target = config_dict
        parts = key.split(".")
        for part in parts[:-1]:
            target = target[part]
        target[parts[-1]] = value

        result = validate_config(config_dict)
        if not result.ok:
            raise ConfigValidationError(result.errors)

        self._config = result.config
        self.save_config()
        logger.info("config set: %s=%r", key, value)
        return self._config

    def reset(self, key: str | None = None) -> AppConfig:
        """Reset the whole configuration, or a single key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return self._config

        default_value = _get_from(AppConfig(), key)
        return self.set(key, default_value)


def _get_from(config: AppConfig, key: str) -> Any:
    value: Any = config
    for part in key.split("."):
        if not isinstance(value, BaseModel) or part not in type(value).model_fields:
            raise KeyError(key)
        value = getattr(value, part)
    return value


def parse_value(raw: str) -> Any:
    """Convert a command-line string to bool/int/None where it looks like one."""
    lowered = raw.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null", ""):
        return None
    if lowered.lstrip("-").isdigit():
        return int(lowered)
    return raw


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    return ConfigService()
