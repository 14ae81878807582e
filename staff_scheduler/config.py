"""Configuration loading for the scheduling engine.

Configuration is read from YAML (``.yaml``/``.yml``) or JSON. Any key that is
missing falls back to the defaults declared on the dataclasses below, so an
empty file (or no file at all) yields the stock behaviour.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from typing import Dict, List, Optional

import yaml


WEEKEND_DEFINITIONS = ("SAT_SUN", "FRI_SAT")


def parse_hm(value) -> time:
    """Parse an ``HH:MM`` (or ``HH:MM:SS``) string into a ``datetime.time``."""
    if isinstance(value, time):
        return value
    parts = [int(x) for x in str(value).strip().split(":")]
    if len(parts) < 2 or len(parts) > 3:
        raise ValueError(f"Invalid time value: {value!r}")
    if parts[0] == 24 and parts[1] == 0:
        return time(0, 0)
    return time(*parts)


@dataclass(frozen=True)
class ShiftTimes:
    start: time
    end: time

    @classmethod
    def from_dict(cls, data: Dict) -> "ShiftTimes":
        return cls(start=parse_hm(data["start"]), end=parse_hm(data["end"]))


def _default_shift_times() -> Dict[str, ShiftTimes]:
    return {
        "MORNING": ShiftTimes(time(6, 0), time(14, 0)),
        "AFTERNOON": ShiftTimes(time(16, 0), time(0, 0)),
        "NIGHT": ShiftTimes(time(23, 0), time(7, 0)),
    }


@dataclass
class SchedulerConfig:
    database_url: str = "sqlite:///scheduler.db"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Shift times used when an organization has no template for a code
    default_shift_times: Dict[str, ShiftTimes] = field(default_factory=_default_shift_times)
    fallback_shift_time: ShiftTimes = field(default_factory=lambda: ShiftTimes(time(8, 0), time(16, 0)))

    # Built-in weekly coverage, used only when an organization has no day rules.
    # Weekdays are 0=Sunday .. 6=Saturday.
    default_coverage: Dict[str, int] = field(default_factory=lambda: {"MORNING": 1, "AFTERNOON": 1})
    busy_weekdays: List[int] = field(default_factory=lambda: [5, 6])
    busy_day_coverage: Dict[str, int] = field(default_factory=lambda: {"MORNING": 2})

    # shift code -> shift codes worked the day before that leave too little rest
    rest_conflicts: Dict[str, List[str]] = field(default_factory=lambda: {"MORNING": ["AFTERNOON"]})

    # shift codes inspected when checking locked work on a weekend
    weekend_lock_codes: List[str] = field(default_factory=lambda: ["MORNING", "AFTERNOON"])

    # validation defaults when an organization has no rules row
    weekend_definition: str = "SAT_SUN"
    enforce_weekend_off_hard: bool = True

    def __post_init__(self):
        if self.weekend_definition not in WEEKEND_DEFINITIONS:
            raise ValueError(
                f"weekend_definition must be one of {WEEKEND_DEFINITIONS}, got {self.weekend_definition!r}"
            )
        for weekday in self.busy_weekdays:
            if not 0 <= int(weekday) <= 6:
                raise ValueError(f"busy_weekdays entries must be 0-6, got {weekday}")

    def shift_times_for(self, shift_code: str) -> ShiftTimes:
        return self.default_shift_times.get(shift_code, self.fallback_shift_time)


def _from_mapping(data: Dict) -> SchedulerConfig:
    kwargs = dict(data)

    if "default_shift_times" in kwargs:
        kwargs["default_shift_times"] = {
            str(code).upper(): ShiftTimes.from_dict(times)
            for code, times in (kwargs["default_shift_times"] or {}).items()
        }
    if "fallback_shift_time" in kwargs:
        kwargs["fallback_shift_time"] = ShiftTimes.from_dict(kwargs["fallback_shift_time"])
    if "default_coverage" in kwargs:
        kwargs["default_coverage"] = {str(k).upper(): int(v) for k, v in kwargs["default_coverage"].items()}
    if "busy_day_coverage" in kwargs:
        kwargs["busy_day_coverage"] = {str(k).upper(): int(v) for k, v in kwargs["busy_day_coverage"].items()}
    if "rest_conflicts" in kwargs:
        kwargs["rest_conflicts"] = {
            str(k).upper(): [str(c).upper() for c in v] for k, v in (kwargs["rest_conflicts"] or {}).items()
        }
    if "weekend_lock_codes" in kwargs:
        kwargs["weekend_lock_codes"] = [str(c).upper() for c in kwargs["weekend_lock_codes"]]
    if "weekend_definition" in kwargs:
        kwargs["weekend_definition"] = str(kwargs["weekend_definition"]).upper()

    known = set(SchedulerConfig.__dataclass_fields__)
    unknown = set(kwargs) - known
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
    return SchedulerConfig(**kwargs)


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load scheduler configuration.

    Args:
        path: YAML or JSON file. ``None`` returns the built-in defaults.

    Returns:
        SchedulerConfig
    """
    if path is None:
        return SchedulerConfig()

    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text) if text.strip() else {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return _from_mapping(data)
