"""
Hierarchical configuration management.

Loads configuration from multiple sources with this precedence (highest wins):
    1. Environment variables (PREFIX_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

Usage:
    config = Config(config_file="reflection.yaml", vault_path="~/Notes")

    config.get("periodic.daily.folder")     # dot-notation access
    config.get("lookback.window_size")      # -> 5
"""

import json
import os
from typing import Any

import yaml
from loguru import logger

_DEFAULT_ENV_PREFIX = "REFLECTION_"
_DEFAULT_WINDOW_SIZE = 5


class Config:
    """
    Central configuration manager.

    Loads and merges configuration from defaults, a config file, and
    environment variables. Env vars use double-underscore to denote nesting:
    REFLECTION_PERIODIC__DAILY__FOLDER=Journal -> config["periodic"]["daily"]["folder"]
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = _DEFAULT_ENV_PREFIX,
        vault_path: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to YAML or JSON configuration file.
            env_prefix: Prefix for environment variable overrides.
            vault_path: Root of the notes vault. Defaults to the current directory.
            defaults: Additional default values to merge (host-specific).
        """
        self.config_file = config_file
        self.env_prefix = env_prefix or ""
        self._vault_path = vault_path or "."
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from all sources."""
        self.config_data = self._get_default_config()

        if self._extra_defaults:
            self._update_dict(self.config_data, self._extra_defaults)

        if self.config_file and os.path.exists(self.config_file):
            file_config = self._load_file(self.config_file)
            self._update_dict(self.config_data, file_config)

        # Env vars override everything
        self._load_from_env()

    def _get_default_config(self) -> dict[str, Any]:
        """Build default configuration."""
        return {
            "vault": {
                "path": os.path.expanduser(self._vault_path),
            },
            "periodic": {
                "daily": {
                    "folder": "",
                    "format": "%Y-%m-%d",
                },
                "weekly": {
                    "folder": "",
                    "format": "%G-W%V",
                    "week_start": "monday",
                },
            },
            "lookback": {
                "window_size": _DEFAULT_WINDOW_SIZE,
            },
            "logging": {
                "level": "WARNING",
                "file": None,
            },
        }

    @staticmethod
    def _load_file(path: str) -> dict[str, Any]:
        """Load a YAML or JSON config file."""
        ext = os.path.splitext(path)[1].lower()
        with open(path) as f:
            if ext in (".yaml", ".yml"):
                return yaml.safe_load(f) or {}
            elif ext == ".json":
                return json.load(f)
        return {}

    def _update_dict(self, target: dict, source: dict) -> None:
        """Recursively merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        """Override config values from environment variables."""
        if not self.env_prefix:
            return
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.env_prefix):
                continue
            config_key = env_key[len(self.env_prefix) :].lower()
            key_parts = config_key.split("__")

            current = self.config_data
            for part in key_parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[key_parts[-1]] = env_value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "vault.path", "periodic.weekly.format"
            default: Returned when key is not found.
        """
        parts = key_path.split(".")
        current = self.config_data
        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key_path: str, value: Any) -> None:
        """Set a config value by dot-notation path, creating intermediate dicts."""
        parts = key_path.split(".")
        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def get_vault_path(self) -> str:
        """Return the resolved vault root."""
        return os.path.expanduser(self.get("vault.path", self._vault_path))

    def get_window_size(self) -> int:
        """Return how many years back to look (at least 1), coerced from env strings."""
        value = self.get("lookback.window_size", _DEFAULT_WINDOW_SIZE)
        try:
            size = int(value)
        except (TypeError, ValueError):
            size = 0
        if size < 1:
            logger.warning(f"Invalid lookback.window_size {value!r}, using {_DEFAULT_WINDOW_SIZE}")
            return _DEFAULT_WINDOW_SIZE
        return size

