"""Configuration management for quickfill."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "quickfill"
DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "settings" / "defaults.yaml"
USER_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"


class ConfigManager:
    """Loads default and user configuration and provides helpers to query values."""

    def __init__(self, user_settings_path: Path | None = None) -> None:
        self.user_settings_path = user_settings_path or USER_SETTINGS_PATH
        self.defaults = self._load_yaml(DEFAULTS_PATH)
        if self.user_settings_path.exists():
            self.user_settings = self._load_yaml(self.user_settings_path)
        else:
            self.user_settings = {}
        self.settings = self._deep_merge(self.defaults, self.user_settings)

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    def get(self, key: str, default: Any | None = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value

    def save(self) -> None:
        self.user_settings_path.parent.mkdir(parents=True, exist_ok=True)
        with self.user_settings_path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(self.settings, handle)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged: dict[str, Any] = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def completion_overwrite(self) -> bool:
        """Whether accepting a proposal replaces the identifier under the caret."""

        return bool(self.settings.get("completion", {}).get("overwrite", False))

    def linked_mode_enabled(self) -> bool:
        return bool(self.settings.get("completion", {}).get("linked_mode", True))
