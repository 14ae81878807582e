"""ScheduleGenerator - regenerates a month's roster around locked assignments."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staff_scheduler.config import SchedulerConfig
from staff_scheduler.dates import enumerate_dates, month_range, parse_date
from staff_scheduler.domain.models import (
    ASSIGNMENT_ASSIGNED,
    SHIFT_DRAFT,
    Shift,
    ShiftAssignment,
    StaffTimeOff,
)
from staff_scheduler.domain.repositories import (
    AssignmentRepository,
    ScheduleMonthRepository,
    ShiftRepository,
    StaffRepository,
    StaffRuleRepository,
    TimeOffRepository,
)
from staff_scheduler.errors import ScheduleMonthNotFound
from staff_scheduler.services.coverage import CoverageRequirement, CoverageResolver
from staff_scheduler.services.eligibility import (
    EligibilityContext,
    EligibilityFilter,
    Slot,
    StaffRuleView,
    TimeOffSpan,
)
from staff_scheduler.services.ledger import StaffLedger
from staff_scheduler.services.selection import AssignmentSelector
from staff_scheduler.services.templates import ShiftTemplateCatalog
from staff_scheduler.services.weekends import plan_weekend_off

logger = logging.getLogger(__name__)

NO_ACTIVE_STAFF_WARNING = "No active staff"


class GenerationState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    PURGING = "purging"
    PLANNING_WEEKENDS = "planning_weekends"
    FILLING = "filling"
    DONE = "done"


class ShiftRef(NamedTuple):
    """Plain snapshot of a shift row, safe to hold across commits."""

    id: int
    date: date
    shift_code: str
    station: Optional[str]

    @property
    def key(self) -> Tuple[date, str, Optional[str]]:
        return self.date, self.shift_code, self.station or None

    @classmethod
    def from_shift(cls, shift: Shift) -> "ShiftRef":
        return cls(shift.id, shift.date, shift.shift_code, shift.station or None)


@dataclass
class GenerationResult:
    created_shifts: int = 0
    created_assignments: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "created_shifts": self.created_shifts,
            "created_assignments": self.created_assignments,
            "warnings": list(self.warnings),
        }


@dataclass
class _Reconciled:
    shifts_by_key: Dict[Tuple[date, str, Optional[str]], ShiftRef]
    locked_by_shift: Dict[int, Set[int]]


class ScheduleGenerator:
    """
    Regenerates shifts and assignments for one schedule month.

    The run moves through LOADING -> PURGING -> PLANNING_WEEKENDS -> FILLING ->
    DONE. Locked assignments, and the shifts holding them, are never modified.
    All bookkeeping lives on the instance for the duration of one ``generate``
    call; use one generator per run.
    """

    def __init__(self, session: Session, cfg: SchedulerConfig | None = None):
        self.session = session
        self.cfg = cfg or SchedulerConfig()
        self.state = GenerationState.IDLE

    def _enter(self, state: GenerationState) -> None:
        logger.debug("Generator state %s -> %s", self.state.value, state.value)
        self.state = state

    def generate(
        self,
        month_id: int,
        organization_ids: Sequence[int],
        date_from: date | str | None = None,
        date_to: date | str | None = None,
    ) -> GenerationResult:
        """
        Regenerate the roster of a month (or a window inside it).

        Args:
            month_id: Schedule month to regenerate
            organization_ids: Caller's organizations; the month must belong to one
            date_from: Optional first date (defaults to the first of the month, clamped to it)
            date_to: Optional last date (defaults to the end of the month, clamped to it)

        Returns:
            GenerationResult with counts and human-readable warnings

        Raises:
            ScheduleMonthNotFound: If the month is missing or outside the organizations
        """
        result = GenerationResult()
        session = self.session

        # 1. LOADING
        self._enter(GenerationState.LOADING)
        month = ScheduleMonthRepository.get_for_organizations(session, month_id, organization_ids)
        if month is None:
            raise ScheduleMonthNotFound(month_id)
        month_id = month.id
        organization_id = month.organization_id

        first_day, last_day = month_range(month.month)
        requested_start = parse_date(date_from) if date_from else first_day
        requested_end = parse_date(date_to) if date_to else last_day
        range_start = max(first_day, requested_start)
        range_end = min(last_day, requested_end)
        if range_start > range_end:
            logger.warning(
                "Window %s..%s has no dates in schedule month %s", requested_start, requested_end, month_id
            )
            result.warnings.append(
                f"Window {requested_start.isoformat()}..{requested_end.isoformat()} "
                f"has no dates in {first_day:%Y-%m}"
            )
            self._enter(GenerationState.DONE)
            return result
        logger.info(
            "Generating schedule month %s (org %s) for %s..%s", month_id, organization_id, range_start, range_end
        )

        coverage = CoverageResolver.load(session, organization_id, range_start, range_end, self.cfg)
        catalog = ShiftTemplateCatalog.load(session, organization_id, self.cfg)

        staff_ids = [staff.id for staff in StaffRepository.get_active(session, organization_id)]
        if not staff_ids:
            logger.warning("Schedule month %s has no active staff, nothing generated", month_id)
            result.warnings.append(NO_ACTIVE_STAFF_WARNING)
            self._enter(GenerationState.DONE)
            return result

        rules_by_staff = {
            rule.staff_id: StaffRuleView.from_rule(rule)
            for rule in StaffRuleRepository.get_by_organization(session, organization_id)
        }
        time_off_by_staff = self._group_time_off(
            TimeOffRepository.get_approved(session, staff_ids, range_start, range_end)
        )
        shifts = ShiftRepository.get_in_range(session, month_id, range_start, range_end)

        # 2. PURGING
        self._enter(GenerationState.PURGING)
        try:
            reconciled = self._purge(shifts)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Error purging month %s for %s..%s", month_id, range_start, range_end)
            result.warnings.append(f"Could not purge {range_start.isoformat()}..{range_end.isoformat()}")
            self._enter(GenerationState.DONE)
            return result

        ledger = StaffLedger(staff_ids)
        for ref in reconciled.shifts_by_key.values():
            for staff_id in reconciled.locked_by_shift.get(ref.id, ()):
                ledger.record(staff_id, ref.date, ref.shift_code)

        # 3. PLANNING_WEEKENDS
        self._enter(GenerationState.PLANNING_WEEKENDS)
        weekend_blocked = plan_weekend_off(
            staff_ids,
            time_off_by_staff,
            reconciled.shifts_by_key.values(),
            reconciled.locked_by_shift,
            range_start,
            range_end,
            self.cfg.weekend_lock_codes,
        )

        eligibility = EligibilityFilter(
            EligibilityContext(
                ledger=ledger,
                time_off_by_staff=time_off_by_staff,
                weekend_blocked=weekend_blocked,
                rules_by_staff=rules_by_staff,
                rest_conflicts=self.cfg.rest_conflicts,
            )
        )
        selector = AssignmentSelector(eligibility, ledger)

        # 4. FILLING
        self._enter(GenerationState.FILLING)
        for day in enumerate_dates(range_start, range_end):
            for requirement in coverage.for_date(day):
                self._fill(
                    month_id, organization_id, day, requirement, reconciled, catalog, selector, ledger, staff_ids, result
                )

        # 5. DONE
        self._enter(GenerationState.DONE)
        logger.info(
            "Generated month %s: %d shifts, %d assignments, %d warnings",
            month_id,
            result.created_shifts,
            result.created_assignments,
            len(result.warnings),
        )
        return result

    @staticmethod
    def _group_time_off(entries: List[StaffTimeOff]) -> Dict[int, List[TimeOffSpan]]:
        grouped: Dict[int, List[TimeOffSpan]] = defaultdict(list)
        for entry in entries:
            grouped[entry.staff_id].append(TimeOffSpan(entry.staff_id, entry.start_date, entry.end_date))
        return dict(grouped)

    def _purge(self, shifts: List[Shift]) -> _Reconciled:
        """
        Delete non-locked assignments in range and every shift left empty.

        Shifts holding at least one locked assignment are kept as-is.
        """
        locked_by_shift: Dict[int, Set[int]] = {}
        shifts_by_key: Dict[Tuple[date, str, Optional[str]], ShiftRef] = {}
        to_delete: List[int] = []

        for shift in shifts:
            locked = {a.staff_id for a in shift.assignments if a.locked}
            if locked:
                ref = ShiftRef.from_shift(shift)
                shifts_by_key[ref.key] = ref
                locked_by_shift[ref.id] = locked
            else:
                to_delete.append(shift.id)

        shift_ids = [shift.id for shift in shifts]

        # Deleted rows leave the identity map; SQLite may hand their ids to new rows
        for shift in shifts:
            for assignment in shift.assignments:
                if not assignment.locked:
                    self.session.expunge(assignment)
            if shift.id in to_delete:
                self.session.expunge(shift)

        deleted_assignments = AssignmentRepository.delete_unlocked_by_shift_ids(self.session, shift_ids)
        deleted_shifts = ShiftRepository.delete_by_ids(self.session, to_delete)
        logger.info(
            "Purged %d assignments and %d shifts, kept %d locked shifts",
            deleted_assignments,
            deleted_shifts,
            len(shifts_by_key),
        )
        return _Reconciled(shifts_by_key=shifts_by_key, locked_by_shift=locked_by_shift)

    def _create_shift(
        self,
        month_id: int,
        organization_id: int,
        day: date,
        requirement: CoverageRequirement,
        catalog: ShiftTemplateCatalog,
    ) -> Optional[ShiftRef]:
        times = catalog.times_for(requirement.shift_code)
        shift = Shift(
            organization_id=organization_id,
            schedule_month_id=month_id,
            template_id=catalog.template_id_for(requirement.shift_code),
            date=day,
            shift_code=requirement.shift_code,
            station=requirement.station,
            start_time=times.start,
            end_time=times.end,
            status=SHIFT_DRAFT,
        )
        try:
            return ShiftRef.from_shift(ShiftRepository.create(self.session, shift))
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Error creating shift %s on %s", requirement.shift_code, day)
            return None

    def _fill(
        self,
        month_id: int,
        organization_id: int,
        day: date,
        requirement: CoverageRequirement,
        reconciled: _Reconciled,
        catalog: ShiftTemplateCatalog,
        selector: AssignmentSelector,
        ledger: StaffLedger,
        staff_ids: List[int],
        result: GenerationResult,
    ) -> None:
        key = (day, requirement.shift_code, requirement.station)
        label = f"{requirement.shift_code}/{requirement.station}" if requirement.station else requirement.shift_code

        ref = reconciled.shifts_by_key.get(key)
        if ref is None:
            ref = self._create_shift(month_id, organization_id, day, requirement, catalog)
            if ref is None:
                result.warnings.append(f"Could not create shift {label} {day.isoformat()}")
                return
            reconciled.shifts_by_key[key] = ref
            result.created_shifts += 1

        slot = Slot(
            day=day,
            shift_code=requirement.shift_code,
            locked_staff=frozenset(reconciled.locked_by_shift.get(ref.id, ())),
            station=requirement.station,
        )
        selection = selector.select(slot, requirement.required_staff, staff_ids)
        result.warnings.extend(selection.warnings)
        if not selection.staff_ids:
            return

        rows = [
            ShiftAssignment(shift_id=ref.id, staff_id=staff_id, status=ASSIGNMENT_ASSIGNED, locked=False)
            for staff_id in selection.staff_ids
        ]
        try:
            AssignmentRepository.bulk_create(self.session, rows)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Error creating assignments for %s on %s", label, day)
            result.warnings.append(f"Error assigning staff {day.isoformat()} {label}")
            return

        for staff_id in selection.staff_ids:
            ledger.record(staff_id, day, requirement.shift_code)
        result.created_assignments += len(selection.staff_ids)


def generate_schedule(
    session: Session,
    month_id: int,
    organization_ids: Sequence[int],
    date_from: date | str | None = None,
    date_to: date | str | None = None,
    cfg: SchedulerConfig | None = None,
) -> GenerationResult:
    """
    Convenience function to regenerate a month with a fresh ScheduleGenerator.

    Args:
        session: Database session
        month_id: Schedule month id
        organization_ids: Caller's organizations
        date_from: Optional window start
        date_to: Optional window end
        cfg: SchedulerConfig (defaults when omitted)

    Returns:
        GenerationResult
    """
    return ScheduleGenerator(session, cfg).generate(month_id, organization_ids, date_from, date_to)
