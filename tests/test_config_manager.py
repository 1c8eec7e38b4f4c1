"""Tests for configuration loading and persistence."""

from __future__ import annotations

import json

from services.config_manager import ConfigManager


def test_defaults_without_file(tmp_path):
    config = ConfigManager(tmp_path).get_config()

    assert config["provider"] == "openai"
    assert config["repository"]["root"] == "."
    assert config["modification"]["explain"] is True
    assert config["modification"]["explanationMaxTokens"] == 100


def test_partial_file_is_merged_with_defaults(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"openai": {"model": "gpt-test"}}))

    config = ConfigManager(tmp_path).get_config()

    assert config["openai"]["model"] == "gpt-test"
    assert config["openai"]["apiKey"] == ""
    assert config["gemini"]["model"] == "gemini-2.5-flash"


def test_invalid_json_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{not json")

    assert ConfigManager(tmp_path).get_config()["provider"] == "openai"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("EDITOR_BACKEND_REPO_ROOT", "/srv/project")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    config = ConfigManager(tmp_path).get_config()

    assert config["repository"]["root"] == "/srv/project"
    assert config["openai"]["apiKey"] == "sk-env"


def test_environment_values_are_not_persisted(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    manager = ConfigManager(tmp_path)

    manager.save_config({"provider": "gemini"})

    stored = json.loads((tmp_path / "config.json").read_text())
    assert stored == {"provider": "gemini"}
    assert manager.get("provider") == "gemini"


def test_set_merges_nested_sections(tmp_path):
    manager = ConfigManager(tmp_path)

    manager.set("modification", {"explain": False})

    config = manager.get_config()
    assert config["modification"]["explain"] is False
    assert config["modification"]["temperature"] == 0.8


def test_config_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("EDITOR_BACKEND_CONFIG_DIR", str(tmp_path / "custom"))

    manager = ConfigManager()

    assert manager.config_file == tmp_path / "custom" / "config.json"
