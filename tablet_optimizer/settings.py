"""
Settings Module for Tablet Optimizer

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from tablet_optimizer.solver import (
    MIN_SEARCH_DEPTH, MAX_SEARCH_DEPTH, get_default_scoring_name, get_scoring_names
)

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Bounds for the number of ranked options shown per tab
MIN_TOP_OPTIONS = 0
MAX_TOP_OPTIONS = 1000

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "search_depth": 2,
    "top_options_count": 50,
    "scoring_name": get_default_scoring_name(),
}


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, value))


def normalize_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge settings over defaults and clamp numeric ranges.

    Args:
        settings: Raw settings (possibly partial)

    Returns:
        New settings dictionary
    """
    result = DEFAULT_SETTINGS.copy()
    result.update(settings)
    result["search_depth"] = _clamp(
        result["search_depth"], MIN_SEARCH_DEPTH, MAX_SEARCH_DEPTH,
        DEFAULT_SETTINGS["search_depth"]
    )
    result["top_options_count"] = _clamp(
        result["top_options_count"], MIN_TOP_OPTIONS, MAX_TOP_OPTIONS,
        DEFAULT_SETTINGS["top_options_count"]
    )
    if result["scoring_name"] not in get_scoring_names():
        logger.warning(f"Unknown scoring '{result['scoring_name']}', using default")
        result["scoring_name"] = DEFAULT_SETTINGS["scoring_name"]
    return result


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file (default: SETTINGS_FILE)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            logger.warning(f"Settings file {path} does not hold an object, using defaults")
            return DEFAULT_SETTINGS.copy()

        result = normalize_settings(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file (default: SETTINGS_FILE)
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
