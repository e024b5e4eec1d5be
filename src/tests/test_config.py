from __future__ import annotations

import json

from spaceflight_tui.config import DEFAULT_CONFIG, load_config, save_config


def test_missing_config_is_created_with_defaults(tmp_path):
    path = tmp_path / "spaceflight" / "config.json"

    config = load_config(str(path))

    assert config == DEFAULT_CONFIG
    assert json.loads(path.read_text()) == DEFAULT_CONFIG


def test_user_values_override_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"page_size": 20, "theme": "spaceflight-light"}))

    config = load_config(str(path))

    assert config["page_size"] == 20
    assert config["theme"] == "spaceflight-light"
    assert config["api_base_url"] == DEFAULT_CONFIG["api_base_url"]


def test_corrupt_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{oops")

    assert load_config(str(path)) == DEFAULT_CONFIG


def test_non_object_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")

    assert load_config(str(path)) == DEFAULT_CONFIG


def test_save_config_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config({"splash_seconds": 0}, str(path))

    assert load_config(str(path))["splash_seconds"] == 0
