"""Manual shift edits. Every assignment written here is locked."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from sqlalchemy.orm import Session

from staff_scheduler.dates import times_overlap
from staff_scheduler.domain.models import ASSIGNMENT_ASSIGNED, Shift, ShiftAssignment
from staff_scheduler.domain.repositories import (
    AssignmentRepository,
    ShiftRepository,
    StaffRepository,
    TimeOffRepository,
)
from staff_scheduler.errors import AssignmentConflict, ShiftNotFound, StaffNotFound

logger = logging.getLogger(__name__)


def _check_conflicts(session: Session, shift: Shift, staff_ids: List[int]) -> None:
    time_off = TimeOffRepository.get_approved(session, staff_ids, shift.date, shift.date)
    if time_off:
        raise AssignmentConflict(f"Staff {time_off[0].staff_id} has approved time off on {shift.date.isoformat()}")

    for staff_id in staff_ids:
        for other in ShiftRepository.get_assigned_on_date(session, staff_id, shift.date):
            if other.id == shift.id:
                continue
            if times_overlap(shift.start_time, shift.end_time, other.start_time, other.end_time):
                raise AssignmentConflict(
                    f"Staff {staff_id} already works {other.shift_code} on {shift.date.isoformat()} "
                    f"({other.start_time:%H:%M}-{other.end_time:%H:%M})"
                )


def set_shift_assignments(
    session: Session,
    shift_id: int,
    organization_ids: Sequence[int],
    staff_ids: Iterable[int],
) -> List[ShiftAssignment]:
    """
    Replace the staff of a shift with a manual, locked selection.

    Args:
        session: Database session
        shift_id: Shift to edit
        organization_ids: Caller's organizations; the shift must belong to one
        staff_ids: Staff to put on the shift (duplicates ignored, empty clears it)

    Returns:
        The new locked assignments

    Raises:
        ShiftNotFound: If the shift is missing or outside the organizations
        StaffNotFound: If a staff member is outside the organizations
        AssignmentConflict: On approved time off or an overlapping shift that day
    """
    shift = ShiftRepository.get_for_organizations(session, shift_id, organization_ids)
    if shift is None:
        raise ShiftNotFound(shift_id)

    unique_ids = list(dict.fromkeys(int(s) for s in staff_ids))
    known = set(StaffRepository.get_ids_for_organizations(session, organization_ids))
    for staff_id in unique_ids:
        if staff_id not in known:
            raise StaffNotFound(staff_id)

    if unique_ids:
        _check_conflicts(session, shift, unique_ids)

    rows = [
        ShiftAssignment(shift_id=shift.id, staff_id=staff_id, status=ASSIGNMENT_ASSIGNED, locked=True)
        for staff_id in unique_ids
    ]
    AssignmentRepository.replace_for_shift(session, shift.id, rows)
    logger.info("Shift %s manually set to staff %s", shift_id, unique_ids)
    return rows
