"""CSV import utilities to load data into database."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd
from sqlalchemy.orm import Session

from staff_scheduler.domain.models import TIME_OFF_APPROVED, StaffProfile, StaffTimeOff
from staff_scheduler.domain.repositories import StaffRepository, TimeOffRepository
from staff_scheduler.services.coverage import replace_day_rules

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("TRUE", "T", "1", "YES", "Y")


def _read(csv_path: str | Path, required: List[str]) -> pd.DataFrame:
    df = pd.read_csv(csv_path)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()

    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{csv_path}: missing columns {missing}")
    return df


def _flag(value, default: bool = True) -> bool:
    if pd.isna(value):
        return default
    return str(value).strip().upper() in _TRUE_VALUES


def _text(value):
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def import_staff_csv(session: Session, csv_path: str | Path, organization_id: int) -> int:
    """
    Import staff profiles from CSV into database.

    Columns: ``display_name`` (required), ``role_in_kitchen``, ``active``.

    Args:
        session: Database session
        csv_path: Path to staff CSV
        organization_id: Organization the staff belong to

    Returns:
        Number of staff imported
    """
    df = _read(csv_path, ["display_name"])

    staff = []
    for _, row in df.iterrows():
        staff.append(
            StaffProfile(
                organization_id=organization_id,
                display_name=str(row["display_name"]).strip(),
                role_in_kitchen=(_text(row.get("role_in_kitchen")) or "").upper() or None,
                active=_flag(row.get("active")),
            )
        )

    StaffRepository.bulk_create(session, staff)
    logger.info("Imported %d staff from %s", len(staff), csv_path)
    return len(staff)


def import_coverage_rules_csv(session: Session, csv_path: str | Path, organization_id: int) -> int:
    """
    Replace an organization's weekly coverage rules from CSV.

    Columns: ``weekday`` (0=Sunday .. 6=Saturday), ``shift_code``,
    ``required_staff``, optional ``station`` and ``active``.
    """
    df = _read(csv_path, ["weekday", "shift_code", "required_staff"])

    rules = [
        {
            "weekday": int(row["weekday"]),
            "shift_code": str(row["shift_code"]).strip(),
            "required_staff": int(row["required_staff"]),
            "station": _text(row.get("station")),
            "active": _flag(row.get("active")),
        }
        for _, row in df.iterrows()
    ]

    created = replace_day_rules(session, organization_id, rules)
    logger.info("Imported %d coverage rules from %s", len(created), csv_path)
    return len(created)


def import_time_off_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import time off from CSV into database.

    Columns: ``staff_id``, ``start_date``, ``end_date`` (inclusive), optional
    ``type``, ``status`` (defaults to APPROVED) and ``notes``.
    """
    df = _read(csv_path, ["staff_id", "start_date", "end_date"])

    # Convert dates
    df["start_date"] = pd.to_datetime(df["start_date"]).dt.date
    df["end_date"] = pd.to_datetime(df["end_date"]).dt.date

    entries = []
    for _, row in df.iterrows():
        if row["end_date"] < row["start_date"]:
            raise ValueError(f"{csv_path}: end_date before start_date for staff {row['staff_id']}")
        entries.append(
            StaffTimeOff(
                staff_id=int(row["staff_id"]),
                type=(_text(row.get("type")) or "VACATION").upper(),
                start_date=row["start_date"],
                end_date=row["end_date"],
                status=(_text(row.get("status")) or TIME_OFF_APPROVED).upper(),
                notes=_text(row.get("notes")),
            )
        )

    TimeOffRepository.bulk_create(session, entries)
    logger.info("Imported %d time off entries from %s", len(entries), csv_path)
    return len(entries)
