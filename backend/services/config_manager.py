"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Environment variable -> config key path
ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "EDITOR_BACKEND_REPO_ROOT": ("repository", "root"),
    "OPENAI_API_KEY": ("openai", "apiKey"),
    "GEMINI_API_KEY": ("gemini", "apiKey"),
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self, config_dir: str | os.PathLike | None = None):
        # Explicit argument, then environment, then the home directory
        config_dir = config_dir or os.environ.get("EDITOR_BACKEND_CONFIG_DIR") or os.path.expanduser("~/.editor_backend")

        config_path = Path(config_dir)
        try:
            config_path.mkdir(parents=True, exist_ok=True)
            self._config_file = config_path / "config.json"
        except OSError as e:
            tmp_dir = Path(tempfile.gettempdir()) / "editor_backend"
            tmp_dir.mkdir(parents=True, exist_ok=True)
            self._config_file = tmp_dir / "config.json"
            logger.warning("Cannot write to %s (%s); using %s", config_dir, e, self._config_file)

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _read_file(self) -> dict[str, Any]:
        """Settings stored on disk, without defaults or environment values"""
        if not self._config_file.exists():
            return {}

        try:
            with open(self._config_file) as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading config %s: %s", self._config_file, e)
            return {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, filling gaps from defaults"""
        config = _deep_merge(self._default_config(), self._read_file())
        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                config.setdefault(section, {})[key] = value
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "provider": "openai",
            "openai": {"apiKey": "", "model": "gpt-4o-mini", "organization": ""},
            "gemini": {"apiKey": "", "model": "gemini-2.5-flash"},
            "vllm": {
                "endpoint": "http://localhost:8000",
                "apiKey": "",
                "model": "default",
            },
            "repository": {"root": "."},
            "modification": {
                "explain": True,
                "temperature": 0.8,
                "maxTokens": 2048,
                "explanationMaxTokens": 100,
            },
            "timeoutSeconds": 60,
            "server": {"host": "127.0.0.1", "port": 8080},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return copy.deepcopy(self._config)

    def save_config(self, config: dict[str, Any]):
        """Merge settings into the config file.

        Only the file contents are rewritten, so values taken from the
        environment are never persisted.
        """
        stored = _deep_merge(self._read_file(), config)

        # Ensure config directory exists
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(stored, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

        self._config = self._load_config()

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self.save_config({key: value})
