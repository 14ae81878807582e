"""Tests for configuration loading."""

import json
from datetime import time

import pytest

from staff_scheduler.config import SchedulerConfig, ShiftTimes, load_config, parse_hm


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg.default_coverage == {"MORNING": 1, "AFTERNOON": 1}
    assert cfg.busy_weekdays == [5, 6]
    assert cfg.shift_times_for("AFTERNOON") == ShiftTimes(time(16, 0), time(0, 0))
    assert cfg.shift_times_for("BRUNCH") == ShiftTimes(time(8, 0), time(16, 0))


def test_parse_hm():
    assert parse_hm("07:30") == time(7, 30)
    assert parse_hm("24:00") == time(0, 0)
    assert parse_hm("23:15:30") == time(23, 15, 30)
    with pytest.raises(ValueError):
        parse_hm("7")


def test_load_yaml(tmp_path):
    path = tmp_path / "scheduler.yaml"
    path.write_text(
        """
log_level: DEBUG
default_shift_times:
  brunch: {start: "09:00", end: "15:00"}
default_coverage:
  brunch: 2
rest_conflicts:
  morning: [night, afternoon]
weekend_definition: fri_sat
"""
    )
    cfg = load_config(path)
    assert cfg.log_level == "DEBUG"
    assert cfg.default_shift_times == {"BRUNCH": ShiftTimes(time(9, 0), time(15, 0))}
    assert cfg.default_coverage == {"BRUNCH": 2}
    assert cfg.rest_conflicts == {"MORNING": ["NIGHT", "AFTERNOON"]}
    assert cfg.weekend_definition == "FRI_SAT"


def test_load_json(tmp_path):
    path = tmp_path / "scheduler.json"
    path.write_text(json.dumps({"busy_weekdays": [6], "enforce_weekend_off_hard": False}))
    cfg = load_config(path)
    assert cfg.busy_weekdays == [6]
    assert cfg.enforce_weekend_off_hard is False


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == SchedulerConfig()


def test_invalid_config_is_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("unknown_key: 1\n")
    with pytest.raises(ValueError, match="unknown_key"):
        load_config(path)

    path.write_text("busy_weekdays: [7]\n")
    with pytest.raises(ValueError):
        load_config(path)

    path.write_text("weekend_definition: SUN_MON\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_sample_config_matches_defaults():
    from pathlib import Path

    sample = Path(__file__).resolve().parent.parent / "scheduler_config.yaml"
    assert load_config(sample) == SchedulerConfig()
