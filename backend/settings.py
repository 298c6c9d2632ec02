from __future__ import annotations

"""Loading and saving of user preferences.

The settings are stored as a list of dictionaries to preserve order.
Each dictionary contains ``key``, ``value`` and ``type`` entries.
"""

from pathlib import Path
import json
import logging
from typing import Any, List, Dict

from backend import DEFAULT_AVAILABLE_TIME, DEFAULT_GOAL, DEFAULT_PROGRAM_WEEKS

# Path to the JSON file where settings are persisted.
SETTINGS_PATH = Path(__file__).resolve().parents[1] / "data" / "settings.json"

# Written to disk on first run.
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "user_id", "value": "local", "type": "str"},
    {"key": "goal", "value": DEFAULT_GOAL, "type": "choice"},
    {"key": "program_weeks", "value": DEFAULT_PROGRAM_WEEKS, "type": "int"},
    {"key": "available_time", "value": DEFAULT_AVAILABLE_TIME, "type": "int"},
    {"key": "units", "value": "kg", "type": "choice"},
    {"key": "current_weight", "value": None, "type": "float"},
    {"key": "goal_weight", "value": None, "type": "float"},
]

PROGRAM_WEEK_OPTIONS = (12, 16, 20, 24)
UNIT_OPTIONS = ("kg", "lbs")

# Internal cache so settings are only read from disk once.
_settings_cache: List[Dict[str, Any]] | None = None


def load_settings() -> List[Dict[str, Any]]:
    """Load settings from :data:`SETTINGS_PATH` or create defaults.

    Keys added since the file was written are filled in from
    :data:`DEFAULT_SETTINGS`.
    """
    if SETTINGS_PATH.exists():
        try:
            with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            logging.exception("Could not read settings from %s", SETTINGS_PATH)
        else:
            if isinstance(data, list):
                known = {item.get("key") for item in data}
                data.extend(
                    dict(item) for item in DEFAULT_SETTINGS if item["key"] not in known
                )
                return data
    defaults = [dict(item) for item in DEFAULT_SETTINGS]
    save_settings(defaults)
    return defaults


def save_settings(settings: List[Dict[str, Any]]) -> None:
    """Persist ``settings`` to :data:`SETTINGS_PATH`."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh)


def get_settings() -> List[Dict[str, Any]]:
    """Return the cached settings list, loading from disk if needed."""
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def clear_cache() -> None:
    global _settings_cache
    _settings_cache = None


def get_value(key: str, default: Any = None) -> Any:
    """Fetch the value associated with ``key``."""
    for item in get_settings():
        if item.get("key") == key:
            value = item.get("value")
            return default if value is None else value
    return default


def set_value(key: str, value: Any) -> None:
    """Update ``key`` with ``value`` and persist the change."""
    if key == "program_weeks" and value not in PROGRAM_WEEK_OPTIONS:
        raise ValueError(f"Program length must be one of {PROGRAM_WEEK_OPTIONS}")
    if key == "units" and value not in UNIT_OPTIONS:
        raise ValueError(f"Units must be one of {UNIT_OPTIONS}")
    settings = get_settings()
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings)
