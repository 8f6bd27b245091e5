"""Tests for settings loading."""
from pathlib import Path

import pytest

from jobmatch.config import DEFAULT_SETTINGS, get_env, load_settings


def test_missing_settings_file_gives_defaults(tmp_path: Path):
    assert load_settings(tmp_path / "settings.yaml") == DEFAULT_SETTINGS


def test_settings_override_defaults(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("workers: 4\nremotive: false\nbogus: 1\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings["workers"] == 4
    assert settings["remotive"] is False
    assert settings["max_queries"] == DEFAULT_SETTINGS["max_queries"]
    assert "bogus" not in settings


def test_settings_clamped(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("workers: 0\nmax_queries: -2\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings["workers"] == 1
    assert settings["max_queries"] == 1


def test_settings_must_be_mapping(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)


def test_get_env_strips(monkeypatch):
    monkeypatch.setenv("JOBMATCH_TEST_KEY", "  abc  ")
    assert get_env("JOBMATCH_TEST_KEY") == "abc"
    assert get_env("JOBMATCH_MISSING_KEY", "dflt") == "dflt"
