"""Exception types raised by the scheduling package."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for scheduling errors."""


class ScheduleMonthNotFound(SchedulerError, LookupError):
    """Schedule month does not exist or belongs to another organization."""

    def __init__(self, month_id):
        super().__init__(f"Schedule month not found: {month_id}")
        self.month_id = month_id


class StaffNotFound(SchedulerError, LookupError):
    def __init__(self, staff_id):
        super().__init__(f"Staff profile not found: {staff_id}")
        self.staff_id = staff_id


class ShiftNotFound(SchedulerError, LookupError):
    def __init__(self, shift_id):
        super().__init__(f"Shift not found: {shift_id}")
        self.shift_id = shift_id


class AssignmentConflict(SchedulerError, ValueError):
    """A manual assignment clashes with time off or another shift."""
