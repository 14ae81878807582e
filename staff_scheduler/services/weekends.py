"""Weekend-off planning: reserve one free Saturday+Sunday per staff member."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from staff_scheduler.dates import weekend_pairs

from .eligibility import TimeOffSpan, is_staff_off

logger = logging.getLogger(__name__)


def has_locked_assignment(
    staff_id: int,
    day: date,
    kept_shifts: Iterable,
    locked_by_shift: Mapping[int, Set[int]],
    lock_codes: Sequence[str] = ("MORNING", "AFTERNOON"),
) -> bool:
    """True if the staff member is locked into a ``lock_codes`` shift on ``day``."""
    for shift in kept_shifts:
        if shift.date != day or shift.shift_code not in lock_codes:
            continue
        if staff_id in locked_by_shift.get(shift.id, ()):
            return True
    return False


def _has_weekend_time_off(entries: Sequence[TimeOffSpan], pairs: List[Tuple[date, date]]) -> bool:
    return any(
        entry.start_date <= saturday and entry.end_date >= sunday
        for saturday, sunday in pairs
        for entry in entries
    )


def plan_weekend_off(
    staff_ids: Iterable[int],
    time_off_by_staff: Mapping[int, Sequence[TimeOffSpan]],
    kept_shifts: Iterable,
    locked_by_shift: Mapping[int, Set[int]],
    range_start: date,
    range_end: date,
    lock_codes: Sequence[str] = ("MORNING", "AFTERNOON"),
) -> Dict[int, Set[date]]:
    """
    Pick at most one protected weekend per staff member.

    Args:
        staff_ids: Active staff
        time_off_by_staff: Approved time off grouped by staff id
        kept_shifts: Shifts that survived the purge (hold locked assignments)
        locked_by_shift: shift id -> staff ids locked into it
        range_start: First date of the generation window
        range_end: Last date of the generation window
        lock_codes: Shift codes inspected for locked weekend work

    Returns:
        staff id -> set with the Saturday and Sunday that must stay free
        (empty set when nothing was reserved)
    """
    kept_shifts = list(kept_shifts)
    pairs = weekend_pairs(range_start, range_end)
    blocked: Dict[int, Set[date]] = {}

    for staff_id in staff_ids:
        blocked[staff_id] = set()
        entries = time_off_by_staff.get(staff_id, ())
        if _has_weekend_time_off(entries, pairs):
            continue

        for saturday, sunday in pairs:
            if is_staff_off(staff_id, saturday, time_off_by_staff) or is_staff_off(
                staff_id, sunday, time_off_by_staff
            ):
                continue
            if has_locked_assignment(
                staff_id, saturday, kept_shifts, locked_by_shift, lock_codes
            ) or has_locked_assignment(staff_id, sunday, kept_shifts, locked_by_shift, lock_codes):
                continue
            blocked[staff_id] = {saturday, sunday}
            break

    reserved = sum(1 for days in blocked.values() if days)
    logger.debug("Reserved weekends for %d of %d staff (%d weekend pairs)", reserved, len(blocked), len(pairs))
    return blocked
