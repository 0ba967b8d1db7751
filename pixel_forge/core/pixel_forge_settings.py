#!/usr/bin/env python3
"""
Settings manager for Pixel Forge
Handles saving and loading user preferences
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from .pixel_forge_constants import (
    APP_NAME,
    DEFAULT_COLOR,
    EXPORT_SCALE,
    GRID_SIZE,
    MAX_GRID_SIZE,
    MAX_RECENT_COLORS,
    MIN_GRID_SIZE,
)
from .pixel_forge_utils import debug_log, is_valid_hex_color


class SettingsManager:
    """Manages application settings with persistence"""

    def __init__(
        self,
        settings_file: Optional[Union[str, Path]] = None,
        app_name: str = APP_NAME,
    ):
        self.app_name = app_name
        self.settings_file = (
            Path(settings_file) if settings_file is not None else self._get_settings_path()
        )
        self.settings = self._load_settings()

    def _get_settings_path(self) -> Path:
        """Get the appropriate settings directory for the platform"""
        if os.name == "nt":  # Windows
            base = Path(os.environ.get("APPDATA", os.path.expanduser("~")))
            settings_dir = base / self.app_name
        else:  # Linux/Mac
            base = Path(os.path.expanduser("~"))
            settings_dir = base / f".{self.app_name}"

        return settings_dir / "settings.json"

    def _load_settings(self) -> dict[str, Any]:
        """Load settings from file"""
        settings = self._get_default_settings()
        if self.settings_file.exists():
            try:
                with open(self.settings_file) as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                # If file is corrupted, start fresh
                debug_log("SETTINGS", f"Ignoring unreadable settings: {e}", "WARNING")
                return settings
            if isinstance(loaded, dict):
                settings.update(loaded)
        return settings

    def _get_default_settings(self) -> dict[str, Any]:
        """Get default settings"""
        return {
            "grid_size": GRID_SIZE,
            "export_scale": EXPORT_SCALE,
            "default_color": DEFAULT_COLOR,
            "last_export_dir": "",
            "log_level": "INFO",
            "log_file": "",
            "recent_colors": [],
            "preferences": {
                "max_recent_colors": MAX_RECENT_COLORS,
            },
        }

    def save_settings(self):
        """Save current settings to file"""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w") as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            debug_log("SETTINGS", f"Could not save settings: {e}", "WARNING")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value"""
        keys = key.split(".")
        value = self.settings
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """Set a setting value"""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            if k not in target:
                target[k] = {}
            target = target[k]
        target[keys[-1]] = value
        self.save_settings()

    # Typed accessors fall back to defaults when the stored value is unusable

    def get_grid_size(self) -> int:
        value = self.get("grid_size", GRID_SIZE)
        if isinstance(value, int) and MIN_GRID_SIZE <= value <= MAX_GRID_SIZE:
            return value
        return GRID_SIZE

    def get_export_scale(self) -> int:
        value = self.get("export_scale", EXPORT_SCALE)
        if isinstance(value, int) and value >= 1:
            return value
        return EXPORT_SCALE

    def get_default_color(self) -> str:
        value = self.get("default_color", DEFAULT_COLOR)
        return value.lower() if is_valid_hex_color(value) else DEFAULT_COLOR

    def add_recent_color(self, color: str):
        """Add a color to the front of the recent colors list"""
        if not is_valid_hex_color(color):
            return
        color = color.lower()

        recent_list = [c for c in self.get_recent_colors() if c != color]
        recent_list.insert(0, color)

        max_recent = self.get("preferences.max_recent_colors", MAX_RECENT_COLORS)
        self.settings["recent_colors"] = recent_list[:max_recent]

        self.save_settings()

    def get_recent_colors(self) -> list:
        return list(self.settings.get("recent_colors", []))

    def set_last_export_dir(self, directory: Union[str, Path]):
        # Ensure the value is a string (not Path object) for JSON serialization
        self.set("last_export_dir", str(directory))

    def get_last_export_dir(self) -> str:
        return self.get("last_export_dir", "")
