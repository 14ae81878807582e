"""Per-run bookkeeping of who works when."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, Optional, Set, Tuple


class StaffLedger:
    """
    Request-scoped record of assignments made (or pre-credited from locked
    rows) during one generation run.

    Tracks, per staff member, the dates worked, the running assignment count
    used for fairness, and which shift code was worked on each date.
    """

    def __init__(self, staff_ids: Iterable[int] = ()):
        self.assigned_dates: Dict[int, Set[date]] = defaultdict(set)
        self.counts: Dict[int, int] = defaultdict(int)
        self.shift_by_date: Dict[Tuple[int, date], str] = {}
        for staff_id in staff_ids:
            self.assigned_dates[staff_id] = set()
            self.counts[staff_id] = 0

    def record(self, staff_id: int, day: date, shift_code: str) -> None:
        self.assigned_dates[staff_id].add(day)
        self.shift_by_date[(staff_id, day)] = shift_code
        self.counts[staff_id] += 1

    def is_assigned_on(self, staff_id: int, day: date) -> bool:
        return day in self.assigned_dates.get(staff_id, ())

    def dates_for(self, staff_id: int) -> Set[date]:
        return set(self.assigned_dates.get(staff_id, ()))

    def count(self, staff_id: int) -> int:
        return self.counts.get(staff_id, 0)

    def shift_on(self, staff_id: int, day: date) -> Optional[str]:
        return self.shift_by_date.get((staff_id, day))
