"""
config_paths.py
User-writable settings for the pack dialog.

Follows the XDG Base Directory Specification:
  Config lives in $XDG_CONFIG_HOME/u8arc  (default: ~/.config/u8arc)

settings.json remembers the last source folder and output archive so the
dialog can offer them again. The packer itself reads no configuration.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

APP_NAME = "u8arc"
SETTINGS_FILE = "settings.json"


def get_config_dir() -> Path:
    """Return the app config directory, creating it if it doesn't exist.

    Respects $XDG_CONFIG_HOME; falls back to ~/.config/u8arc.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    config_dir = base / APP_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILE


def load_settings() -> dict:
    """Return saved settings, or {} if the file is missing or unreadable."""
    path = get_settings_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(settings: dict) -> None:
    path = get_settings_path()
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")


def remember_paths(source_dir: Path | str, output_path: Path | str) -> None:
    """Store the last source folder and output archive used."""
    settings = load_settings()
    settings["last_source_dir"] = str(source_dir)
    settings["last_output_path"] = str(output_path)
    save_settings(settings)
