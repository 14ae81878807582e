"""Pytest configuration and shared fixtures."""

from datetime import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from staff_scheduler.domain.models import Base, Organization, Shift, ShiftAssignment, StaffProfile
from staff_scheduler.domain.repositories import ShiftRepository
from staff_scheduler.services.months import create_month


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def org_id(db_session):
    organization = Organization(name="Test Kitchen")
    db_session.add(organization)
    db_session.commit()
    return organization.id


@pytest.fixture
def other_org_id(db_session):
    organization = Organization(name="Other Kitchen")
    db_session.add(organization)
    db_session.commit()
    return organization.id


@pytest.fixture
def make_staff(db_session, org_id):
    """Factory adding staff profiles; returns their ids in creation order."""

    def _make(count, active=True, organization_id=None):
        staff = [
            StaffProfile(
                organization_id=organization_id or org_id,
                display_name=f"Staff {i + 1}",
                active=active,
            )
            for i in range(count)
        ]
        db_session.add_all(staff)
        db_session.commit()
        return [s.id for s in staff]

    return _make


@pytest.fixture
def month_id(db_session, org_id):
    """Schedule month for March 2025 (March 1st is a Saturday)."""
    return create_month(db_session, org_id, "2025-03").id


@pytest.fixture
def add_shift(db_session, org_id, month_id):
    """Factory adding a shift with optional locked and unlocked staff."""

    def _add(day, shift_code="MORNING", locked=(), unlocked=(), station=None,
             start=time(6, 0), end=time(14, 0)):
        shift = Shift(
            organization_id=org_id,
            schedule_month_id=month_id,
            date=day,
            shift_code=shift_code,
            station=station,
            start_time=start,
            end_time=end,
        )
        db_session.add(shift)
        db_session.commit()
        rows = [ShiftAssignment(shift_id=shift.id, staff_id=s, locked=True) for s in locked]
        rows += [ShiftAssignment(shift_id=shift.id, staff_id=s, locked=False) for s in unlocked]
        db_session.add_all(rows)
        db_session.commit()
        return shift.id

    return _add


@pytest.fixture
def read_roster(db_session):
    """Returns sorted (date, shift_code, station, staff_id, locked) tuples of a month."""

    def _read(month):
        rows = []
        for shift in ShiftRepository.get_by_month(db_session, month):
            for assignment in shift.assignments:
                rows.append((shift.date, shift.shift_code, shift.station, assignment.staff_id, assignment.locked))
        return sorted(rows, key=lambda r: (r[0], r[1], r[2] or "", r[3]))

    return _read
