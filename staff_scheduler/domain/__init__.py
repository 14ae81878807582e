"""Domain models and data access layer."""

from .models import (
    Base,
    CoverageOverride,
    CoverageRule,
    Organization,
    OrganizationScheduleRules,
    ScheduleMonth,
    Shift,
    ShiftAssignment,
    ShiftTemplate,
    StaffProfile,
    StaffScheduleRule,
    StaffTimeOff,
)
from .repositories import (
    AssignmentRepository,
    CoverageRepository,
    OrganizationRulesRepository,
    ScheduleMonthRepository,
    ShiftRepository,
    ShiftTemplateRepository,
    StaffRepository,
    StaffRuleRepository,
    TimeOffRepository,
)

__all__ = [
    "Base",
    "Organization",
    "StaffProfile",
    "StaffScheduleRule",
    "StaffTimeOff",
    "ScheduleMonth",
    "CoverageRule",
    "CoverageOverride",
    "ShiftTemplate",
    "Shift",
    "ShiftAssignment",
    "OrganizationScheduleRules",
    "ScheduleMonthRepository",
    "CoverageRepository",
    "ShiftTemplateRepository",
    "StaffRepository",
    "StaffRuleRepository",
    "TimeOffRepository",
    "ShiftRepository",
    "AssignmentRepository",
    "OrganizationRulesRepository",
]
