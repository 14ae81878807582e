"""Month-level rules validation of a generated (or hand-edited) roster."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from .config import SchedulerConfig
from .dates import FRIDAY, SATURDAY, longest_streak, month_range, weekend_pairs
from .domain.repositories import OrganizationRulesRepository, ScheduleMonthRepository, ShiftRepository, StaffRuleRepository
from .errors import ScheduleMonthNotFound

ERROR = "error"
WARNING = "warning"


@dataclass
class ValidationIssue:
    level: str
    message: str
    staff_id: Optional[int] = None
    date: Optional[date] = None
    shift_id: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            "level": self.level,
            "message": self.message,
            "staff_id": self.staff_id,
            "date": self.date.isoformat() if self.date else None,
            "shift_id": self.shift_id,
        }


@dataclass
class ValidationReport:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, issue: ValidationIssue) -> None:
        (self.errors if issue.level == ERROR else self.warnings).append(issue)

    def to_dict(self) -> Dict:
        return {
            "errors": [i.to_dict() for i in self.errors],
            "warnings": [i.to_dict() for i in self.warnings],
        }


def has_weekend_off(worked: set, month_start: date, month_end: date, weekend_definition: str = "SAT_SUN") -> bool:
    """True when some two-day weekend of the month has no work at all."""
    if not worked:
        return True
    first = FRIDAY if weekend_definition == "FRI_SAT" else SATURDAY
    return any(a not in worked and b not in worked for a, b in weekend_pairs(month_start, month_end, first))


def validate_month(
    session: Session,
    month_id: int,
    organization_ids: Sequence[int],
    cfg: SchedulerConfig | None = None,
) -> ValidationReport:
    """
    Check a month's assignments against staff and organization rules.

    Args:
        session: Database session
        month_id: Schedule month to check
        organization_ids: Caller's organizations
        cfg: Supplies weekend defaults when the organization has no rules row

    Returns:
        ValidationReport split into errors and warnings

    Raises:
        ScheduleMonthNotFound: If the month is missing or outside the organizations
    """
    cfg = cfg or SchedulerConfig()
    month = ScheduleMonthRepository.get_for_organizations(session, month_id, organization_ids)
    if month is None:
        raise ScheduleMonthNotFound(month_id)

    month_start, month_end = month_range(month.month)
    rules_by_staff = {r.staff_id: r for r in StaffRuleRepository.get_by_organization(session, month.organization_id)}
    org_rules = OrganizationRulesRepository.get(session, month.organization_id)
    if org_rules is not None:
        weekend_definition = org_rules.weekend_definition or "SAT_SUN"
        enforce_hard = bool(org_rules.enforce_weekend_off_hard)
    else:
        weekend_definition = cfg.weekend_definition
        enforce_hard = cfg.enforce_weekend_off_hard

    # staff id -> [(date, shift_code, shift_id)]
    worked: Dict[int, List[tuple]] = defaultdict(list)
    for shift in ShiftRepository.get_by_month(session, month.id):
        for assignment in shift.assignments:
            worked[assignment.staff_id].append((shift.date, shift.shift_code, shift.id))

    report = ValidationReport()
    for staff_id in sorted(worked):
        entries = sorted(worked[staff_id])
        rule = rules_by_staff.get(staff_id)

        if rule is not None:
            allowed = rule.allowed_shift_codes or []
            for day, code, shift_id in entries:
                if allowed and code not in allowed:
                    report.add(ValidationIssue(ERROR, f"Shift {code} not allowed", staff_id, day, shift_id))

            if rule.rotation_mode and rule.rotation_mode != "NONE":
                if len({code for _, code, _ in entries}) <= 1:
                    report.add(ValidationIssue(WARNING, "Rotation enabled but no shift change this month", staff_id))

            if rule.max_consecutive_days:
                streak = longest_streak(day for day, _, _ in entries)
                if streak > rule.max_consecutive_days:
                    report.add(ValidationIssue(WARNING, f"Exceeds max consecutive days ({streak})", staff_id))

        if rule is not None and rule.requires_weekend_off_per_month is False:
            continue
        if not has_weekend_off({day for day, _, _ in entries}, month_start, month_end, weekend_definition):
            level = ERROR if enforce_hard else WARNING
            report.add(ValidationIssue(level, "No free weekend this month", staff_id))

    return report
