"""Coverage requirements: weekly day rules merged with date overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from staff_scheduler.config import SchedulerConfig
from staff_scheduler.dates import weekday_index
from staff_scheduler.domain.models import CoverageOverride, CoverageRule
from staff_scheduler.domain.repositories import CoverageRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayRule:
    """In-memory weekly rule, shaped like ``CoverageRule``."""

    weekday: int
    shift_code: str
    required_staff: int
    station: Optional[str] = None


@dataclass(frozen=True)
class DateOverride:
    """In-memory date override, shaped like ``CoverageOverride``."""

    date: date
    shift_code: str
    required_staff: int
    station: Optional[str] = None


@dataclass(frozen=True)
class CoverageRequirement:
    shift_code: str
    station: Optional[str]
    required_staff: int


def normalize_station(station) -> Optional[str]:
    if station is None:
        return None
    station = str(station).strip()
    return station or None


def coverage_key(shift_code: str, station) -> Tuple[str, Optional[str]]:
    return shift_code, normalize_station(station)


def default_day_rules(cfg: SchedulerConfig | None = None) -> List[DayRule]:
    """
    Built-in weekly coverage used when an organization has no day rules.

    Every day needs ``cfg.default_coverage``; ``cfg.busy_weekdays`` (Friday and
    Saturday by default) take ``cfg.busy_day_coverage`` on top.
    """
    cfg = cfg or SchedulerConfig()
    rules = []
    for weekday in range(7):
        counts = dict(cfg.default_coverage)
        if weekday in cfg.busy_weekdays:
            counts.update(cfg.busy_day_coverage)
        for shift_code, required in counts.items():
            rules.append(DayRule(weekday=weekday, shift_code=shift_code, required_staff=int(required)))
    return rules


def resolve_coverage_for_date(
    day: date,
    day_rules: Iterable,
    overrides: Iterable,
) -> List[CoverageRequirement]:
    """
    Effective staffing requirements for one date.

    Args:
        day: Date to resolve
        day_rules: Weekly rules (objects with weekday, shift_code, station, required_staff)
        overrides: Date overrides (objects with date, shift_code, station, required_staff)

    Returns:
        Requirements with ``required_staff > 0``, day rules first in their
        original order, overrides replacing entries with the same
        (shift_code, station) key
    """
    weekday = weekday_index(day)
    merged: Dict[Tuple[str, Optional[str]], CoverageRequirement] = {}

    for rule in day_rules:
        if rule.weekday != weekday:
            continue
        key = coverage_key(rule.shift_code, rule.station)
        merged[key] = CoverageRequirement(key[0], key[1], int(rule.required_staff or 0))

    for override in overrides:
        if override.date != day:
            continue
        key = coverage_key(override.shift_code, override.station)
        merged[key] = CoverageRequirement(key[0], key[1], int(override.required_staff or 0))

    return [req for req in merged.values() if req.required_staff > 0]


class CoverageResolver:
    """Resolves per-date coverage for one organization and date window."""

    def __init__(self, day_rules: List, overrides: List, cfg: SchedulerConfig | None = None):
        self.uses_default_rules = len(day_rules) == 0
        if day_rules:
            self.day_rules = [
                DayRule(r.weekday, r.shift_code, int(r.required_staff or 0), normalize_station(r.station))
                for r in day_rules
            ]
        else:
            self.day_rules = default_day_rules(cfg)
        self.overrides = [
            DateOverride(o.date, o.shift_code, int(o.required_staff or 0), normalize_station(o.station))
            for o in overrides
        ]

    @classmethod
    def load(
        cls,
        session: Session,
        organization_id: int,
        date_from: date,
        date_to: date,
        cfg: SchedulerConfig | None = None,
    ) -> "CoverageResolver":
        day_rules, overrides = get_coverage_rules(session, organization_id, date_from, date_to)
        resolver = cls(day_rules, overrides, cfg)
        if resolver.uses_default_rules:
            logger.info("Organization %s has no coverage rules, using built-in defaults", organization_id)
        return resolver

    def for_date(self, day: date) -> List[CoverageRequirement]:
        return resolve_coverage_for_date(day, self.day_rules, self.overrides)


def get_coverage_rules(
    session: Session,
    organization_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Tuple[List[CoverageRule], List[CoverageOverride]]:
    """Active day rules of an organization and its overrides inside the window."""
    day_rules = CoverageRepository.get_day_rules(session, organization_id)
    overrides = CoverageRepository.get_overrides(session, organization_id, date_from, date_to)
    return day_rules, overrides


def replace_day_rules(session: Session, organization_id: int, rules: Iterable[Dict]) -> List[CoverageRule]:
    """
    Replace all weekly rules of an organization.

    Args:
        session: Database session
        organization_id: Owning organization
        rules: Dicts with weekday, shift_code, required_staff and optional station/active

    Returns:
        The inserted CoverageRule rows
    """
    rows = []
    for rule in rules:
        weekday = int(rule["weekday"])
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday must be 0-6 (0=Sunday), got {weekday}")
        rows.append(
            CoverageRule(
                organization_id=organization_id,
                weekday=weekday,
                shift_code=str(rule["shift_code"]).upper(),
                station=normalize_station(rule.get("station")),
                required_staff=max(0, int(rule["required_staff"])),
                active=bool(rule.get("active", True)),
            )
        )
    CoverageRepository.replace_day_rules(session, organization_id, rows)
    logger.info("Replaced coverage rules for organization %s (%d rules)", organization_id, len(rows))
    return rows


def create_override(
    session: Session,
    organization_id: int,
    day: date,
    shift_code: str,
    required_staff: int,
    station: Optional[str] = None,
    reason: Optional[str] = None,
) -> CoverageOverride:
    """Add a date-specific requirement for an organization."""
    override = CoverageOverride(
        organization_id=organization_id,
        date=day,
        shift_code=shift_code.upper(),
        station=normalize_station(station),
        required_staff=max(0, int(required_staff)),
        reason=reason,
    )
    return CoverageRepository.create_override(session, override)
