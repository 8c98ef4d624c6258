"""Tests for AppConfig helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from sqlpad import config as config_module
from sqlpad.config import AppConfig, AutocompleteSettings, load_config, save_config
from sqlpad.sqlintel.storage import DEFAULT_STORE_DIR


def test_load_config_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_config()

    assert result == AppConfig()


def test_load_config_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
theme = "light"
active_connection = "replica"
selected_database = "analytics"
usage_dir = "/var/tmp/sqlpad"

[autocomplete]
max_suggestions = 20
debounce_seconds = 0.3
dialect = "mysql"
track_usage = false
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.theme == "light"
    assert result.active_connection == "replica"
    assert result.selected_database == "analytics"
    assert result.usage_directory() == Path("/var/tmp/sqlpad")
    assert result.autocomplete == AutocompleteSettings(
        max_suggestions=20,
        debounce_seconds=0.3,
        dialect="mysql",
        track_usage=False,
    )


def test_load_config_ignores_invalid_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
theme = 3
selected_database = ""

[autocomplete]
max_suggestions = 0
debounce_seconds = -1
track_usage = "yes"
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.theme == "dark"
    assert result.autocomplete == AutocompleteSettings()


def test_load_config_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("theme = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result == AppConfig()


def test_save_config_round_trips(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "nested" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    config = AppConfig(
        theme="light",
        active_connection="replica",
        selected_database="shop",
        usage_dir=tmp_path / "usage",
        autocomplete=AutocompleteSettings(max_suggestions=10, track_usage=False),
    )

    save_config(config)

    content = config_path.read_text()
    assert 'active_connection = "replica"' in content
    assert "[autocomplete]" in content
    assert "track_usage = false" in content
    assert load_config() == config


def test_usage_directory_defaults_to_shared_store() -> None:
    assert AppConfig().usage_directory() == DEFAULT_STORE_DIR


def test_with_helpers_return_updated_copies() -> None:
    config = AppConfig()

    assert config.with_connection("replica").active_connection == "replica"
    assert config.with_selected_database("shop").selected_database == "shop"
    updated = config.with_autocomplete(max_suggestions=5)
    assert updated.autocomplete.max_suggestions == 5
    assert config.autocomplete.max_suggestions == 50
