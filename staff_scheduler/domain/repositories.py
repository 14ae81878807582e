"""Repository classes for data access."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from .models import (
    TIME_OFF_APPROVED,
    CoverageOverride,
    CoverageRule,
    OrganizationScheduleRules,
    ScheduleMonth,
    Shift,
    ShiftAssignment,
    ShiftTemplate,
    StaffProfile,
    StaffScheduleRule,
    StaffTimeOff,
)


class ScheduleMonthRepository:
    """Repository for schedule month data access."""

    @staticmethod
    def get_for_organizations(
        session: Session, month_id: int, organization_ids: Sequence[int]
    ) -> Optional[ScheduleMonth]:
        """Get a month by id, only if it belongs to one of the given organizations."""
        if not organization_ids:
            return None
        return (
            session.query(ScheduleMonth)
            .filter(ScheduleMonth.id == month_id)
            .filter(ScheduleMonth.organization_id.in_(list(organization_ids)))
            .first()
        )

    @staticmethod
    def get_by_org_and_month(session: Session, organization_id: int, month: date) -> Optional[ScheduleMonth]:
        return (
            session.query(ScheduleMonth)
            .filter(ScheduleMonth.organization_id == organization_id, ScheduleMonth.month == month)
            .first()
        )

    @staticmethod
    def create(session: Session, month: ScheduleMonth) -> ScheduleMonth:
        """Create a new schedule month."""
        session.add(month)
        session.commit()
        session.refresh(month)
        return month


class CoverageRepository:
    """Repository for weekly coverage rules and date overrides."""

    @staticmethod
    def get_day_rules(session: Session, organization_id: int, active_only: bool = True) -> List[CoverageRule]:
        query = session.query(CoverageRule).filter(CoverageRule.organization_id == organization_id)
        if active_only:
            query = query.filter(CoverageRule.active.is_(True))
        return query.order_by(CoverageRule.weekday, CoverageRule.shift_code, CoverageRule.id).all()

    @staticmethod
    def get_overrides(
        session: Session,
        organization_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[CoverageOverride]:
        query = session.query(CoverageOverride).filter(CoverageOverride.organization_id == organization_id)
        if date_from is not None:
            query = query.filter(CoverageOverride.date >= date_from)
        if date_to is not None:
            query = query.filter(CoverageOverride.date <= date_to)
        return query.order_by(CoverageOverride.date, CoverageOverride.id).all()

    @staticmethod
    def replace_day_rules(session: Session, organization_id: int, rules: List[CoverageRule]) -> List[CoverageRule]:
        """Delete every weekly rule of the organization and insert ``rules``."""
        session.query(CoverageRule).filter(CoverageRule.organization_id == organization_id).delete(
            synchronize_session=False
        )
        session.add_all(rules)
        session.commit()
        return rules

    @staticmethod
    def create_override(session: Session, override: CoverageOverride) -> CoverageOverride:
        session.add(override)
        session.commit()
        session.refresh(override)
        return override


class ShiftTemplateRepository:
    """Repository for shift templates."""

    @staticmethod
    def get_by_organization(session: Session, organization_id: int) -> List[ShiftTemplate]:
        return (
            session.query(ShiftTemplate)
            .filter(ShiftTemplate.organization_id == organization_id)
            .order_by(ShiftTemplate.shift_code)
            .all()
        )


class StaffRepository:
    """Repository for staff profiles."""

    @staticmethod
    def get_active(session: Session, organization_id: int) -> List[StaffProfile]:
        """Get active staff of an organization, ordered by id."""
        return (
            session.query(StaffProfile)
            .filter(StaffProfile.organization_id == organization_id)
            .filter(StaffProfile.active.is_(True))
            .order_by(StaffProfile.id)
            .all()
        )

    @staticmethod
    def get_all_for_organization(session: Session, organization_id: int) -> List[StaffProfile]:
        return (
            session.query(StaffProfile)
            .filter(StaffProfile.organization_id == organization_id)
            .order_by(StaffProfile.id)
            .all()
        )

    @staticmethod
    def get_for_organizations(
        session: Session, staff_id: int, organization_ids: Sequence[int]
    ) -> Optional[StaffProfile]:
        if not organization_ids:
            return None
        return (
            session.query(StaffProfile)
            .filter(StaffProfile.id == staff_id)
            .filter(StaffProfile.organization_id.in_(list(organization_ids)))
            .first()
        )

    @staticmethod
    def get_ids_for_organizations(session: Session, organization_ids: Sequence[int]) -> List[int]:
        rows = (
            session.query(StaffProfile.id)
            .filter(StaffProfile.organization_id.in_(list(organization_ids)))
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def bulk_create(session: Session, staff: List[StaffProfile]) -> None:
        session.add_all(staff)
        session.commit()


class StaffRuleRepository:
    """Repository for per-staff schedule rules."""

    @staticmethod
    def get_by_organization(session: Session, organization_id: int) -> List[StaffScheduleRule]:
        return (
            session.query(StaffScheduleRule)
            .filter(StaffScheduleRule.organization_id == organization_id)
            .all()
        )

    @staticmethod
    def get_by_staff(session: Session, staff_id: int, organization_id: int) -> Optional[StaffScheduleRule]:
        return (
            session.query(StaffScheduleRule)
            .filter(StaffScheduleRule.staff_id == staff_id)
            .filter(StaffScheduleRule.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def save(session: Session, rule: StaffScheduleRule) -> StaffScheduleRule:
        session.add(rule)
        session.commit()
        session.refresh(rule)
        return rule


class TimeOffRepository:
    """Repository for staff time off."""

    @staticmethod
    def get_approved(
        session: Session, staff_ids: Iterable[int], date_from: date, date_to: date
    ) -> List[StaffTimeOff]:
        """Approved time off for the given staff overlapping ``[date_from, date_to]``."""
        staff_ids = list(staff_ids)
        if not staff_ids:
            return []
        return (
            session.query(StaffTimeOff)
            .filter(StaffTimeOff.status == TIME_OFF_APPROVED)
            .filter(StaffTimeOff.staff_id.in_(staff_ids))
            .filter(StaffTimeOff.end_date >= date_from)
            .filter(StaffTimeOff.start_date <= date_to)
            .order_by(StaffTimeOff.staff_id, StaffTimeOff.start_date)
            .all()
        )

    @staticmethod
    def bulk_create(session: Session, entries: List[StaffTimeOff]) -> None:
        session.add_all(entries)
        session.commit()


class ShiftRepository:
    """Repository for shift data access."""

    @staticmethod
    def get_in_range(session: Session, month_id: int, date_from: date, date_to: date) -> List[Shift]:
        """Shifts of a month within a date range, with their assignments loaded."""
        return (
            session.query(Shift)
            .options(selectinload(Shift.assignments))
            .filter(Shift.schedule_month_id == month_id)
            .filter(Shift.date >= date_from)
            .filter(Shift.date <= date_to)
            .order_by(Shift.date, Shift.shift_code, Shift.id)
            .all()
        )

    @staticmethod
    def get_by_month(session: Session, month_id: int) -> List[Shift]:
        return ShiftRepository.get_in_range(session, month_id, date.min, date.max)

    @staticmethod
    def get_for_organizations(session: Session, shift_id: int, organization_ids: Sequence[int]) -> Optional[Shift]:
        if not organization_ids:
            return None
        return (
            session.query(Shift)
            .filter(Shift.id == shift_id)
            .filter(Shift.organization_id.in_(list(organization_ids)))
            .first()
        )

    @staticmethod
    def get_assigned_on_date(session: Session, staff_id: int, day: date) -> List[Shift]:
        """Shifts on ``day`` that the staff member is assigned to."""
        return (
            session.query(Shift)
            .join(ShiftAssignment, ShiftAssignment.shift_id == Shift.id)
            .filter(ShiftAssignment.staff_id == staff_id)
            .filter(Shift.date == day)
            .all()
        )

    @staticmethod
    def create(session: Session, shift: Shift) -> Shift:
        """Create a new shift."""
        session.add(shift)
        session.commit()
        session.refresh(shift)
        return shift

    @staticmethod
    def delete_by_ids(session: Session, shift_ids: Sequence[int]) -> int:
        """Delete shifts by id. Returns number of deleted rows."""
        if not shift_ids:
            return 0
        count = (
            session.query(Shift)
            .filter(Shift.id.in_(list(shift_ids)))
            .delete(synchronize_session=False)
        )
        session.commit()
        return count

    @staticmethod
    def set_status_for_month(session: Session, month_id: int, status: str) -> int:
        count = (
            session.query(Shift)
            .filter(Shift.schedule_month_id == month_id)
            .update({Shift.status: status}, synchronize_session=False)
        )
        session.commit()
        return count


class AssignmentRepository:
    """Repository for shift assignment data access."""

    @staticmethod
    def get_by_month(session: Session, month_id: int) -> List[ShiftAssignment]:
        return (
            session.query(ShiftAssignment)
            .join(Shift)
            .filter(Shift.schedule_month_id == month_id)
            .order_by(Shift.date, Shift.shift_code, ShiftAssignment.staff_id)
            .all()
        )

    @staticmethod
    def bulk_create(session: Session, assignments: List[ShiftAssignment]) -> None:
        """Create multiple assignments."""
        session.add_all(assignments)
        session.commit()

    @staticmethod
    def delete_unlocked_by_shift_ids(session: Session, shift_ids: Sequence[int]) -> int:
        """Delete non-locked assignments of the given shifts. Returns number of deleted rows."""
        if not shift_ids:
            return 0
        count = (
            session.query(ShiftAssignment)
            .filter(ShiftAssignment.shift_id.in_(list(shift_ids)))
            .filter(ShiftAssignment.locked.is_(False))
            .delete(synchronize_session=False)
        )
        session.commit()
        return count

    @staticmethod
    def replace_for_shift(session: Session, shift_id: int, assignments: List[ShiftAssignment]) -> None:
        """Delete every assignment of a shift and insert ``assignments`` in one commit."""
        session.query(ShiftAssignment).filter(ShiftAssignment.shift_id == shift_id).delete(
            synchronize_session=False
        )
        session.add_all(assignments)
        session.commit()


class OrganizationRulesRepository:
    @staticmethod
    def get(session: Session, organization_id: int) -> Optional[OrganizationScheduleRules]:
        return (
            session.query(OrganizationScheduleRules)
            .filter(OrganizationScheduleRules.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def save(session: Session, rules: OrganizationScheduleRules) -> OrganizationScheduleRules:
        session.add(rules)
        session.commit()
        session.refresh(rules)
        return rules
