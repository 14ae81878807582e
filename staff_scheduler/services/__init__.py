"""Business logic services for scheduling."""

from .assignments import set_shift_assignments
from .coverage import CoverageRequirement, CoverageResolver, create_override, get_coverage_rules, replace_day_rules
from .eligibility import EligibilityFilter, EligibilityRule
from .ledger import StaffLedger
from .months import create_month, publish_month
from .selection import AssignmentSelector
from .staff_rules import get_org_rules, get_staff_rules, update_org_rules, update_staff_rules
from .templates import ShiftTemplateCatalog
from .weekends import plan_weekend_off

__all__ = [
    "CoverageRequirement",
    "CoverageResolver",
    "get_coverage_rules",
    "replace_day_rules",
    "create_override",
    "ShiftTemplateCatalog",
    "StaffLedger",
    "EligibilityFilter",
    "EligibilityRule",
    "AssignmentSelector",
    "plan_weekend_off",
    "create_month",
    "publish_month",
    "get_staff_rules",
    "update_staff_rules",
    "get_org_rules",
    "update_org_rules",
    "set_shift_assignments",
]
