"""SQLAlchemy models for the staff scheduling system."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


MONTH_DRAFT = "DRAFT"
MONTH_PUBLISHED = "PUBLISHED"

SHIFT_DRAFT = "DRAFT"
SHIFT_PUBLISHED = "PUBLISHED"

ASSIGNMENT_ASSIGNED = "ASSIGNED"

TIME_OFF_REQUESTED = "REQUESTED"
TIME_OFF_APPROVED = "APPROVED"
TIME_OFF_REJECTED = "REJECTED"


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name='{self.name}')>"


class StaffProfile(Base):
    """A member of staff who can be rostered."""

    __tablename__ = "staff_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    display_name = Column(String(200), nullable=False, default="")
    role_in_kitchen = Column(String(50), nullable=True)  # e.g. COOK, DISHWASHER, WAITER
    active = Column(Boolean, nullable=False, default=True)

    assignments = relationship("ShiftAssignment", back_populates="staff")
    time_off = relationship("StaffTimeOff", back_populates="staff")
    schedule_rule = relationship("StaffScheduleRule", back_populates="staff", uselist=False)

    def __repr__(self) -> str:
        return f"<StaffProfile(id={self.id}, name='{self.display_name}', active={self.active})>"


class StaffScheduleRule(Base):
    """Per-staff scheduling restrictions."""

    __tablename__ = "staff_schedule_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff_profiles.id"), nullable=False, unique=True)
    allowed_shift_codes = Column(JSON, nullable=True)  # empty or null means any code
    max_consecutive_days = Column(Integer, nullable=True)
    rotation_mode = Column(String(20), nullable=False, default="NONE")
    preferred_days_off = Column(JSON, nullable=True)
    requires_weekend_off_per_month = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    staff = relationship("StaffProfile", back_populates="schedule_rule")

    def __repr__(self) -> str:
        return (
            f"<StaffScheduleRule(staff={self.staff_id}, allowed={self.allowed_shift_codes}, "
            f"max_consecutive={self.max_consecutive_days})>"
        )


class StaffTimeOff(Base):
    """Time off request; only APPROVED rows block scheduling."""

    __tablename__ = "staff_time_off"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff_profiles.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False, default="VACATION")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    status = Column(String(20), nullable=False, default=TIME_OFF_REQUESTED)
    notes = Column(Text, nullable=True)

    staff = relationship("StaffProfile", back_populates="time_off")

    def covers(self, day) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        return f"<StaffTimeOff(staff={self.staff_id}, {self.start_date}..{self.end_date}, status={self.status})>"


class ScheduleMonth(Base):
    """One calendar month of roster for an organization."""

    __tablename__ = "schedule_months"
    __table_args__ = (UniqueConstraint("organization_id", "month", name="uq_schedule_month_org_month"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    month = Column(Date, nullable=False)  # first day of the month
    status = Column(String(20), nullable=False, default=MONTH_DRAFT)
    published_at = Column(DateTime, nullable=True)

    shifts = relationship("Shift", back_populates="schedule_month")

    def __repr__(self) -> str:
        return f"<ScheduleMonth(id={self.id}, org={self.organization_id}, month={self.month}, status={self.status})>"


class CoverageRule(Base):
    """Weekly recurring staffing requirement. weekday: 0=Sunday .. 6=Saturday."""

    __tablename__ = "schedule_day_requirements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    weekday = Column(Integer, nullable=False)
    shift_code = Column(String(30), nullable=False)
    station = Column(String(50), nullable=True)
    required_staff = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return (
            f"<CoverageRule(weekday={self.weekday}, code={self.shift_code}, "
            f"station={self.station}, required={self.required_staff})>"
        )


class CoverageOverride(Base):
    """Date-specific staffing requirement that supersedes the weekly rule."""

    __tablename__ = "schedule_date_overrides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    shift_code = Column(String(30), nullable=False)
    station = Column(String(50), nullable=True)
    required_staff = Column(Integer, nullable=False, default=0)
    reason = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<CoverageOverride(date={self.date}, code={self.shift_code}, "
            f"station={self.station}, required={self.required_staff})>"
        )


class ShiftTemplate(Base):
    __tablename__ = "shift_templates"
    __table_args__ = (UniqueConstraint("organization_id", "shift_code", name="uq_shift_template_code"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    shift_code = Column(String(30), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    def __repr__(self) -> str:
        return f"<ShiftTemplate(code={self.shift_code}, {self.start_time}-{self.end_time})>"


class Shift(Base):
    """A concrete work period, unique per month by (date, shift_code, station)."""

    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    schedule_month_id = Column(Integer, ForeignKey("schedule_months.id"), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("shift_templates.id"), nullable=True)
    date = Column(Date, nullable=False)
    shift_code = Column(String(30), nullable=False)
    station = Column(String(50), nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, default=SHIFT_DRAFT)

    schedule_month = relationship("ScheduleMonth", back_populates="shifts")
    assignments = relationship("ShiftAssignment", back_populates="shift")

    @property
    def key(self):
        return (self.date, self.shift_code, self.station or None)

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, date={self.date}, code={self.shift_code}, station={self.station})>"


class ShiftAssignment(Base):
    """Staff-to-shift link. Locked rows are manual edits the generator never touches."""

    __tablename__ = "shift_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shift_id = Column(Integer, ForeignKey("shifts.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff_profiles.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ASSIGNMENT_ASSIGNED)
    locked = Column(Boolean, nullable=False, default=False)

    shift = relationship("Shift", back_populates="assignments")
    staff = relationship("StaffProfile", back_populates="assignments")

    def __repr__(self) -> str:
        return f"<ShiftAssignment(id={self.id}, shift={self.shift_id}, staff={self.staff_id}, locked={self.locked})>"


class OrganizationScheduleRules(Base):
    __tablename__ = "organization_schedule_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, unique=True)
    weekend_definition = Column(String(10), nullable=False, default="SAT_SUN")  # SAT_SUN or FRI_SAT
    enforce_weekend_off_hard = Column(Boolean, nullable=False, default=True)
    rotation_enabled = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
