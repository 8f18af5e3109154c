"""
Tests for JSON settings persistence.

Usage:
    pytest tests/test_settings.py
"""

import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tablet_optimizer.settings import (
    DEFAULT_SETTINGS,
    load_settings,
    normalize_settings,
    save_settings,
)


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "config.json") == DEFAULT_SETTINGS


def test_round_trip(tmp_path):
    path = tmp_path / "config.json"
    settings = {"search_depth": 3, "top_options_count": 10, "scoring_name": "max_distance"}
    save_settings(settings, path)
    assert load_settings(path) == settings


def test_partial_file_merges_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"search_depth": 1}), encoding="utf-8")
    settings = load_settings(path)
    assert settings["search_depth"] == 1
    assert settings["top_options_count"] == DEFAULT_SETTINGS["top_options_count"]


def test_invalid_json_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS

    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_normalize_clamps_and_validates():
    settings = normalize_settings({
        "search_depth": 9,
        "top_options_count": -5,
        "scoring_name": "no_such_scoring",
    })
    assert settings["search_depth"] == 3
    assert settings["top_options_count"] == 0
    assert settings["scoring_name"] == DEFAULT_SETTINGS["scoring_name"]

    assert normalize_settings({"search_depth": "deep"})["search_depth"] == DEFAULT_SETTINGS["search_depth"]


def test_save_to_unwritable_path_does_not_raise(tmp_path):
    save_settings(DEFAULT_SETTINGS, tmp_path / "missing_dir" / "config.json")
