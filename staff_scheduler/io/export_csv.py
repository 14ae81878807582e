"""CSV export of a month's roster."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pandas as pd
from sqlalchemy.orm import Session

from staff_scheduler.domain.repositories import ShiftRepository, StaffRepository

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = [
    "date",
    "shift_id",
    "shift_code",
    "station",
    "start_time",
    "end_time",
    "staff_id",
    "display_name",
    "locked",
]


def roster_dataframe(session: Session, month_id: int) -> pd.DataFrame:
    """One row per assignment of the month, ordered by date, shift code and staff."""
    shifts = ShiftRepository.get_by_month(session, month_id)
    names: Dict[int, str] = {}
    if shifts:
        for staff in StaffRepository.get_all_for_organization(session, shifts[0].organization_id):
            names[staff.id] = staff.display_name

    rows = []
    for shift in shifts:
        for assignment in shift.assignments:
            rows.append(
                {
                    "date": shift.date.isoformat(),
                    "shift_id": shift.id,
                    "shift_code": shift.shift_code,
                    "station": shift.station or "",
                    "start_time": shift.start_time.strftime("%H:%M"),
                    "end_time": shift.end_time.strftime("%H:%M"),
                    "staff_id": assignment.staff_id,
                    "display_name": names.get(assignment.staff_id, ""),
                    "locked": bool(assignment.locked),
                }
            )

    df = pd.DataFrame(rows, columns=ROSTER_COLUMNS)
    if not df.empty:
        df = df.sort_values(["date", "shift_code", "station", "staff_id"]).reset_index(drop=True)
    return df


def export_roster_csv(session: Session, month_id: int, out_path: str | Path) -> int:
    """
    Write a month's roster to CSV.

    Args:
        session: Database session
        month_id: Schedule month to export
        out_path: Destination CSV path

    Returns:
        Number of assignment rows written
    """
    df = roster_dataframe(session, month_id)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    logger.info("Exported %d roster rows to %s", len(df), out_path)
    return len(df)
