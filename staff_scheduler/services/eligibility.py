"""Eligibility predicates deciding whether a staff member may take a shift."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple

from staff_scheduler.dates import longest_streak

from .ledger import StaffLedger


class TimeOffSpan(NamedTuple):
    """Approved time off, inclusive on both ends."""

    staff_id: int
    start_date: date
    end_date: date


class StaffRuleView(NamedTuple):
    staff_id: int
    allowed_shift_codes: Tuple[str, ...] = ()
    max_consecutive_days: Optional[int] = None

    @classmethod
    def from_rule(cls, rule) -> "StaffRuleView":
        return cls(rule.staff_id, tuple(rule.allowed_shift_codes or ()), rule.max_consecutive_days)


class EligibilityRule(Enum):
    NOT_LOCKED_IN_SHIFT = "not_locked_in_shift"
    NO_TIME_OFF = "no_time_off"
    NOT_WEEKEND_BLOCKED = "not_weekend_blocked"
    NOT_ASSIGNED_SAME_DAY = "not_assigned_same_day"
    SHIFT_CODE_ALLOWED = "shift_code_allowed"
    NO_REST_CONFLICT = "no_rest_conflict"
    WITHIN_CONSECUTIVE_LIMIT = "within_consecutive_limit"


STRICT_RULES = (
    EligibilityRule.NOT_LOCKED_IN_SHIFT,
    EligibilityRule.NO_TIME_OFF,
    EligibilityRule.NOT_WEEKEND_BLOCKED,
    EligibilityRule.NOT_ASSIGNED_SAME_DAY,
    EligibilityRule.SHIFT_CODE_ALLOWED,
    EligibilityRule.NO_REST_CONFLICT,
    EligibilityRule.WITHIN_CONSECUTIVE_LIMIT,
)

# Fallback set: only the checks that are never broken
RELAXED_RULES = (
    EligibilityRule.NOT_LOCKED_IN_SHIFT,
    EligibilityRule.NO_TIME_OFF,
    EligibilityRule.NOT_ASSIGNED_SAME_DAY,
    EligibilityRule.SHIFT_CODE_ALLOWED,
)


@dataclass(frozen=True)
class Slot:
    """The shift being filled."""

    day: date
    shift_code: str
    locked_staff: FrozenSet[int] = frozenset()
    station: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.shift_code}/{self.station}" if self.station else self.shift_code


@dataclass
class EligibilityContext:
    ledger: StaffLedger
    time_off_by_staff: Mapping[int, Sequence[TimeOffSpan]] = field(default_factory=dict)
    weekend_blocked: Mapping[int, Set[date]] = field(default_factory=dict)
    rules_by_staff: Mapping[int, StaffRuleView] = field(default_factory=dict)
    rest_conflicts: Mapping[str, Sequence[str]] = field(default_factory=lambda: {"MORNING": ["AFTERNOON"]})


def is_staff_off(staff_id: int, day: date, time_off_by_staff: Mapping[int, Sequence[TimeOffSpan]]) -> bool:
    return any(entry.start_date <= day <= entry.end_date for entry in time_off_by_staff.get(staff_id, ()))


def is_shift_allowed(staff_id: int, shift_code: str, rules_by_staff: Mapping[int, StaffRuleView]) -> bool:
    rule = rules_by_staff.get(staff_id)
    if rule is None or not rule.allowed_shift_codes:
        return True
    return shift_code in rule.allowed_shift_codes


def has_rest_conflict(
    staff_id: int,
    day: date,
    shift_code: str,
    ledger: StaffLedger,
    rest_conflicts: Mapping[str, Sequence[str]],
) -> bool:
    conflicting = rest_conflicts.get(shift_code)
    if not conflicting:
        return False
    return ledger.shift_on(staff_id, day - timedelta(days=1)) in conflicting


def within_consecutive_limit(
    staff_id: int,
    day: date,
    ledger: StaffLedger,
    rules_by_staff: Mapping[int, StaffRuleView],
) -> bool:
    rule = rules_by_staff.get(staff_id)
    if rule is None or not rule.max_consecutive_days:
        return True
    worked = ledger.dates_for(staff_id)
    if not worked:
        return True
    worked.add(day)
    return longest_streak(worked) <= rule.max_consecutive_days


_CHECKS: Dict[EligibilityRule, Callable[[int, Slot, EligibilityContext], bool]] = {
    EligibilityRule.NOT_LOCKED_IN_SHIFT: lambda staff_id, slot, ctx: staff_id not in slot.locked_staff,
    EligibilityRule.NO_TIME_OFF: lambda staff_id, slot, ctx: not is_staff_off(
        staff_id, slot.day, ctx.time_off_by_staff
    ),
    EligibilityRule.NOT_WEEKEND_BLOCKED: lambda staff_id, slot, ctx: slot.day
    not in ctx.weekend_blocked.get(staff_id, ()),
    EligibilityRule.NOT_ASSIGNED_SAME_DAY: lambda staff_id, slot, ctx: not ctx.ledger.is_assigned_on(
        staff_id, slot.day
    ),
    EligibilityRule.SHIFT_CODE_ALLOWED: lambda staff_id, slot, ctx: is_shift_allowed(
        staff_id, slot.shift_code, ctx.rules_by_staff
    ),
    EligibilityRule.NO_REST_CONFLICT: lambda staff_id, slot, ctx: not has_rest_conflict(
        staff_id, slot.day, slot.shift_code, ctx.ledger, ctx.rest_conflicts
    ),
    EligibilityRule.WITHIN_CONSECUTIVE_LIMIT: lambda staff_id, slot, ctx: within_consecutive_limit(
        staff_id, slot.day, ctx.ledger, ctx.rules_by_staff
    ),
}


class EligibilityFilter:
    """Applies a list of ``EligibilityRule`` checks to candidate staff."""

    def __init__(self, context: EligibilityContext):
        self.context = context

    def check(self, rule: EligibilityRule, staff_id: int, slot: Slot) -> bool:
        return _CHECKS[rule](staff_id, slot, self.context)

    def first_failure(
        self, staff_id: int, slot: Slot, rules: Sequence[EligibilityRule] = STRICT_RULES
    ) -> Optional[EligibilityRule]:
        """The first rule the staff member fails, or None when eligible."""
        for rule in rules:
            if not self.check(rule, staff_id, slot):
                return rule
        return None

    def is_eligible(self, staff_id: int, slot: Slot, rules: Sequence[EligibilityRule] = STRICT_RULES) -> bool:
        return self.first_failure(staff_id, slot, rules) is None

    def candidates(
        self, staff_ids: Iterable[int], slot: Slot, rules: Sequence[EligibilityRule] = STRICT_RULES
    ) -> List[int]:
        return [staff_id for staff_id in staff_ids if self.is_eligible(staff_id, slot, rules)]
