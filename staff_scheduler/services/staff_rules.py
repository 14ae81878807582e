"""Per-staff and per-organization scheduling rules."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.orm import Session

from staff_scheduler.config import WEEKEND_DEFINITIONS
from staff_scheduler.domain.models import OrganizationScheduleRules, StaffScheduleRule
from staff_scheduler.domain.repositories import OrganizationRulesRepository, StaffRepository, StaffRuleRepository
from staff_scheduler.errors import StaffNotFound

_UNSET = object()


def get_staff_rules(session: Session, staff_id: int, organization_ids: Sequence[int]) -> Optional[StaffScheduleRule]:
    staff = StaffRepository.get_for_organizations(session, staff_id, organization_ids)
    if staff is None:
        raise StaffNotFound(staff_id)
    return StaffRuleRepository.get_by_staff(session, staff.id, staff.organization_id)


def update_staff_rules(
    session: Session,
    staff_id: int,
    organization_ids: Sequence[int],
    allowed_shift_codes=_UNSET,
    max_consecutive_days=_UNSET,
    rotation_mode=_UNSET,
    preferred_days_off=_UNSET,
    requires_weekend_off=_UNSET,
) -> StaffScheduleRule:
    """
    Create or update the schedule rule of a staff member.

    Only the arguments that are passed are changed. Passing ``None`` for
    ``allowed_shift_codes`` or ``max_consecutive_days`` clears the restriction.

    Raises:
        StaffNotFound: If the staff member is not in one of the organizations
    """
    staff = StaffRepository.get_for_organizations(session, staff_id, organization_ids)
    if staff is None:
        raise StaffNotFound(staff_id)

    rule = StaffRuleRepository.get_by_staff(session, staff.id, staff.organization_id)
    if rule is None:
        rule = StaffScheduleRule(staff_id=staff.id, organization_id=staff.organization_id)

    if allowed_shift_codes is not _UNSET:
        rule.allowed_shift_codes = [c.upper() for c in allowed_shift_codes] if allowed_shift_codes else None
    if max_consecutive_days is not _UNSET:
        if max_consecutive_days is not None and int(max_consecutive_days) < 1:
            raise ValueError("max_consecutive_days must be at least 1")
        rule.max_consecutive_days = max_consecutive_days
    if rotation_mode is not _UNSET:
        rule.rotation_mode = (rotation_mode or "NONE").upper()
    if preferred_days_off is not _UNSET:
        rule.preferred_days_off = preferred_days_off
    if requires_weekend_off is not _UNSET:
        rule.requires_weekend_off_per_month = bool(requires_weekend_off)

    return StaffRuleRepository.save(session, rule)


def get_org_rules(session: Session, organization_id: int) -> Optional[OrganizationScheduleRules]:
    return OrganizationRulesRepository.get(session, organization_id)


def update_org_rules(
    session: Session,
    organization_id: int,
    weekend_definition: Optional[str] = None,
    enforce_weekend_off_hard: Optional[bool] = None,
    rotation_enabled: Optional[bool] = None,
) -> OrganizationScheduleRules:
    rules = OrganizationRulesRepository.get(session, organization_id)
    if rules is None:
        rules = OrganizationScheduleRules(organization_id=organization_id)

    if weekend_definition is not None:
        weekend_definition = weekend_definition.upper()
        if weekend_definition not in WEEKEND_DEFINITIONS:
            raise ValueError(f"weekend_definition must be one of {WEEKEND_DEFINITIONS}")
        rules.weekend_definition = weekend_definition
    if enforce_weekend_off_hard is not None:
        rules.enforce_weekend_off_hard = enforce_weekend_off_hard
    if rotation_enabled is not None:
        rules.rotation_enabled = rotation_enabled

    return OrganizationRulesRepository.save(session, rules)
