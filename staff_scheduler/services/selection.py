"""Choose which eligible staff fill a shift's open slots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from .eligibility import RELAXED_RULES, STRICT_RULES, EligibilityFilter, Slot
from .ledger import StaffLedger

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    remaining: int
    staff_ids: List[int] = field(default_factory=list)
    relaxed_count: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        return max(0, self.remaining - len(self.staff_ids))


class AssignmentSelector:
    """
    Greedy two-pass selection.

    The strict pass takes eligible staff with the fewest assignments so far.
    When that leaves open slots, the relaxed pass (``RELAXED_RULES``) tops up
    from the remaining staff and the relaxation is reported. Anything still missing is reported as a shortfall.
    """

    def __init__(self, eligibility: EligibilityFilter, ledger: StaffLedger):
        self.eligibility = eligibility
        self.ledger = ledger

    def _by_fairness(self, staff_ids: List[int]) -> List[int]:
        # sorted() is stable: ties keep the active-staff order
        return sorted(staff_ids, key=self.ledger.count)

    def select(self, slot: Slot, required_staff: int, staff_ids: Sequence[int]) -> Selection:
        """
        Pick staff for ``slot``.

        Args:
            slot: Shift date, code and staff already locked into it
            required_staff: Headcount required by coverage
            staff_ids: All active staff, in a stable order

        Returns:
            Selection with the chosen staff ids and any warnings
        """
        remaining = required_staff - len(slot.locked_staff)
        selection = Selection(remaining=remaining)
        if remaining <= 0:
            return selection

        strict = self._by_fairness(self.eligibility.candidates(staff_ids, slot, STRICT_RULES))
        selected = strict[:remaining]

        if len(selected) < remaining:
            chosen = set(selected)
            relaxed = self._by_fairness(
                [s for s in self.eligibility.candidates(staff_ids, slot, RELAXED_RULES) if s not in chosen]
            )
            extra = relaxed[: remaining - len(selected)]
            if extra:
                selection.relaxed_count = len(extra)
                selection.warnings.append(
                    f"Relaxed rules for {slot.day.isoformat()} {slot.label} ({len(extra)} assignments)"
                )
                selected = selected + extra

        selection.staff_ids = selected
        if len(selected) < remaining:
            selection.warnings.append(
                f"Incomplete coverage {slot.day.isoformat()} {slot.label}: {len(selected)}/{remaining}"
            )
            logger.debug("Shortfall on %s %s: %d/%d", slot.day, slot.shift_code, len(selected), remaining)
        return selection
