import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_ENV = "DSV_SETTINGS"
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "resources" / "settings.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "log_level": "INFO",
    "speed": 1.0,
    "toast_ms": 3000,
    "playback": {
        "cadence_ms": 400,
        "hold_ms": {
            "compare": 0,
            "swap": 250,
            "shift": 250,
            "insert": 250,
        },
    },
    "array": {
        "max_size": 15,
        "random_min": 10,
        "random_max": 99,
    },
    "stack": {
        "max_size": 8,
        "peek_ms": 800,
        "clear_ms": 150,
    },
    "queue": {
        "max_size": 7,
        "enqueue_ms": 600,
        "dequeue_ms": 600,
        "peek_ms": 800,
        "clear_ms": 150,
    },
    "linked_list": {
        "max_size": 10,
        "walk_ms": 400,
        "inserted_ms": 600,
        "delete_ms": 600,
        "found_ms": 1000,
    },
    "bst": {
        "insert_path_ms": 400,
        "inserted_ms": 600,
        "search_path_ms": 500,
        "found_ms": 600,
        "delete_ms": 600,
        "visit_ms": 400,
        "visited_ms": 200,
        "traversal_end_ms": 1000,
        "check_ms": 400,
    },
    "palette": {
        "default": "#b8b8d6",
        "compare": "#fde047",
        "swap": "#f87171",
        "swapped": "#4ade80",
        "shift": "#fb923c",
        "shifted": "#fdba74",
        "insert": "#22c55e",
        "inserted": "#22c55e",
        "delete": "#ef4444",
        "push": "#16a34a",
        "pop": "#ef4444",
        "peek": "#3b82f6",
        "visit": "#f59e0b",
        "visited": "#16a34a",
        "found": "#16a34a",
        "unbalanced": "#ef4444",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Optional[os.PathLike] = None) -> Dict[str, Any]:
    """
    Returns the default settings overlaid with an optional JSON file.

    Lookup order: explicit ``path``, the ``DSV_SETTINGS`` environment
    variable, then ``resources/settings.json`` beside the application.
    A missing file is not an error; an unreadable one falls back to defaults.
    """
    candidate = path or os.environ.get(SETTINGS_ENV) or DEFAULT_SETTINGS_PATH
    settings_path = Path(candidate)
    if not settings_path.exists():
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        with open(settings_path, "r", encoding="utf-8") as handle:
            overrides = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring settings file %s: %s", settings_path, exc)
        return copy.deepcopy(DEFAULT_SETTINGS)

    if not isinstance(overrides, dict):
        logger.warning("Ignoring settings file %s: top level must be an object", settings_path)
        return copy.deepcopy(DEFAULT_SETTINGS)

    logger.info("Loaded settings from %s", settings_path)
    return _merge(DEFAULT_SETTINGS, overrides)
