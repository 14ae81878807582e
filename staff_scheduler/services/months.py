"""Schedule month lifecycle: create and publish."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy.orm import Session

from staff_scheduler.dates import normalize_month
from staff_scheduler.domain.models import MONTH_DRAFT, MONTH_PUBLISHED, SHIFT_PUBLISHED, ScheduleMonth
from staff_scheduler.domain.repositories import ScheduleMonthRepository, ShiftRepository
from staff_scheduler.errors import ScheduleMonthNotFound

logger = logging.getLogger(__name__)


def create_month(session: Session, organization_id: int, month) -> ScheduleMonth:
    """
    Get or create the schedule month of an organization.

    Args:
        session: Database session
        organization_id: Owning organization
        month: ``YYYY-MM``, ``YYYY-MM-DD`` or a date inside the month

    Returns:
        The existing month if one is already there, otherwise a new DRAFT month
    """
    first_day = normalize_month(month)
    existing = ScheduleMonthRepository.get_by_org_and_month(session, organization_id, first_day)
    if existing is not None:
        return existing
    created = ScheduleMonthRepository.create(
        session, ScheduleMonth(organization_id=organization_id, month=first_day, status=MONTH_DRAFT)
    )
    logger.info("Created schedule month %s for organization %s (%s)", created.id, organization_id, first_day)
    return created


def publish_month(session: Session, month_id: int, organization_ids: Sequence[int]) -> ScheduleMonth:
    """Mark a month and all of its shifts as PUBLISHED."""
    month = ScheduleMonthRepository.get_for_organizations(session, month_id, organization_ids)
    if month is None:
        raise ScheduleMonthNotFound(month_id)
    month.status = MONTH_PUBLISHED
    month.published_at = datetime.utcnow()
    session.commit()
    count = ShiftRepository.set_status_for_month(session, month.id, SHIFT_PUBLISHED)
    logger.info("Published schedule month %s (%d shifts)", month.id, count)
    return month
