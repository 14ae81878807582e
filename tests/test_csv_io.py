"""Tests for CSV import/export functionality."""

from datetime import date

import pandas as pd
import pytest

from staff_scheduler.domain.models import TIME_OFF_APPROVED, TIME_OFF_REQUESTED, StaffTimeOff
from staff_scheduler.domain.repositories import CoverageRepository, StaffRepository
from staff_scheduler.io.export_csv import ROSTER_COLUMNS, export_roster_csv
from staff_scheduler.io.import_csv import import_coverage_rules_csv, import_staff_csv, import_time_off_csv


def test_import_staff_csv(db_session, org_id, tmp_path):
    """Test importing staff from CSV."""
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text(
        """Display_Name , role_in_kitchen,active
Ana Ruiz,cook,true
Ben Park,,
Cleo Diaz,dishwasher,no
"""
    )

    count = import_staff_csv(db_session, csv_file, org_id)
    assert count == 3

    staff = StaffRepository.get_all_for_organization(db_session, org_id)
    assert [s.display_name for s in staff] == ["Ana Ruiz", "Ben Park", "Cleo Diaz"]
    assert [s.role_in_kitchen for s in staff] == ["COOK", None, "DISHWASHER"]
    assert [s.active for s in staff] == [True, True, False]
    assert [s.display_name for s in StaffRepository.get_active(db_session, org_id)] == ["Ana Ruiz", "Ben Park"]


def test_import_staff_csv_requires_name(db_session, org_id, tmp_path):
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text("role_in_kitchen\nCOOK\n")

    with pytest.raises(ValueError, match="display_name"):
        import_staff_csv(db_session, csv_file, org_id)


def test_import_coverage_rules_csv_replaces_rules(db_session, org_id, tmp_path):
    csv_file = tmp_path / "coverage.csv"
    csv_file.write_text(
        """weekday,shift_code,required_staff,station,active
1,morning,2,,
5,MORNING,1,GRILL,true
6,AFTERNOON,1,,false
"""
    )

    assert import_coverage_rules_csv(db_session, csv_file, org_id) == 3
    assert import_coverage_rules_csv(db_session, csv_file, org_id) == 3

    active = CoverageRepository.get_day_rules(db_session, org_id)
    assert [(r.weekday, r.shift_code, r.station, r.required_staff) for r in active] == [
        (1, "MORNING", None, 2),
        (5, "MORNING", "GRILL", 1),
    ]
    assert len(CoverageRepository.get_day_rules(db_session, org_id, active_only=False)) == 3


def test_import_time_off_csv(db_session, org_id, make_staff, tmp_path):
    a, b = make_staff(2)
    csv_file = tmp_path / "time_off.csv"
    csv_file.write_text(
        f"""staff_id,start_date,end_date,type,status,notes
{a},2025-03-10,2025-03-14,vacation,,Family trip
{b},2025-03-03,2025-03-03,SICK,requested,
"""
    )

    assert import_time_off_csv(db_session, csv_file) == 2

    rows = db_session.query(StaffTimeOff).order_by(StaffTimeOff.staff_id).all()
    assert [(r.staff_id, r.start_date, r.end_date, r.type, r.status) for r in rows] == [
        (a, date(2025, 3, 10), date(2025, 3, 14), "VACATION", TIME_OFF_APPROVED),
        (b, date(2025, 3, 3), date(2025, 3, 3), "SICK", TIME_OFF_REQUESTED),
    ]
    assert rows[0].notes == "Family trip"


def test_import_time_off_csv_rejects_reversed_range(db_session, make_staff, tmp_path):
    (a,) = make_staff(1)
    csv_file = tmp_path / "time_off.csv"
    csv_file.write_text(f"staff_id,start_date,end_date\n{a},2025-03-10,2025-03-09\n")

    with pytest.raises(ValueError):
        import_time_off_csv(db_session, csv_file)


def test_export_roster_csv(db_session, org_id, month_id, make_staff, add_shift, tmp_path):
    """Test exporting a month's roster to CSV."""
    a, b = make_staff(2)
    add_shift(date(2025, 3, 4), "MORNING", locked=[b], station="GRILL")
    add_shift(date(2025, 3, 3), "AFTERNOON", unlocked=[a, b])

    out = tmp_path / "out" / "roster.csv"
    count = export_roster_csv(db_session, month_id, out)
    assert count == 3

    df = pd.read_csv(out, keep_default_na=False)
    assert list(df.columns) == ROSTER_COLUMNS
    assert df["date"].tolist() == ["2025-03-03", "2025-03-03", "2025-03-04"]
    assert df["staff_id"].tolist() == [a, b, b]
    assert df["display_name"].tolist() == ["Staff 1", "Staff 2", "Staff 2"]
    assert df["station"].tolist() == ["", "", "GRILL"]
    assert df["locked"].tolist() == [False, False, True]
    assert df["start_time"].tolist()[0] == "06:00"


def test_export_empty_month_writes_header(db_session, month_id, tmp_path):
    out = tmp_path / "roster.csv"
    assert export_roster_csv(db_session, month_id, out) == 0
    assert out.read_text().strip() == ",".join(ROSTER_COLUMNS)
