"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from rostering.config import DEFAULT_DB_URL, SchedulerConfig, load_config, normalize_weekday


REPO_ROOT = Path(__file__).resolve().parents[1]


def test_defaults():
    cfg = load_config()
    assert cfg.db_url == DEFAULT_DB_URL
    assert cfg.schedule_weekdays == ("monday", "friday")
    assert cfg.default_actor == "system"


def test_load_repo_config():
    """Test the shipped config file loads."""
    cfg = load_config(REPO_ROOT / "rostering_config.yaml")
    assert cfg.schedule_weekdays == ("monday", "friday")
    assert cfg.default_actor == "coordinator"


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "db_url: sqlite:///:memory:\n"
        "schedule_weekdays: [Wednesday, Saturday]\n"
        "default_actor: secretary\n"
        "organization: Centro\n"
    )
    cfg = load_config(path)
    assert cfg.db_url == "sqlite:///:memory:"
    assert cfg.schedule_weekdays == ("wednesday", "saturday")
    assert cfg.default_actor == "secretary"
    assert cfg.extra == {"organization": "Centro"}


def test_load_json_with_comma_weekdays(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"schedule_weekdays": "tuesday, thursday"}))
    cfg = load_config(path)
    assert cfg.schedule_weekdays == ("tuesday", "thursday")
    assert cfg.db_url == DEFAULT_DB_URL


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == SchedulerConfig()


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- monday\n- friday\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_unknown_weekday_is_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("schedule_weekdays: [monday, caturday]\n")
    with pytest.raises(ValueError, match="caturday"):
        load_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_normalize_weekday():
    assert normalize_weekday(" FRIDAY ") == "friday"
    with pytest.raises(ValueError):
        normalize_weekday("fri")
