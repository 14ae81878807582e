"""Calendar helpers shared by the resolver, planner and generator.

Weekday numbers follow one convention across the package:
0=Sunday, 1=Monday, ... 6=Saturday.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, List, Tuple

SUNDAY = 0
FRIDAY = 5
SATURDAY = 6


def weekday_index(day: date) -> int:
    """Weekday of ``day`` with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def normalize_month(value) -> date:
    """Accept ``YYYY-MM``, ``YYYY-MM-DD`` or a date; return the first of that month."""
    if isinstance(value, str) and len(value.strip()) == 7:
        value = f"{value.strip()}-01"
    return parse_date(value).replace(day=1)


def end_of_month(day: date) -> date:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last)


def month_range(month: date) -> Tuple[date, date]:
    first = normalize_month(month)
    return first, end_of_month(first)


def enumerate_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def weekend_pairs(start: date, end: date, first_weekday: int = SATURDAY) -> List[Tuple[date, date]]:
    """
    Consecutive two-day weekends fully inside ``[start, end]``.

    Args:
        start: First date of the window
        end: Last date of the window
        first_weekday: Weekday that opens the weekend (SATURDAY, or FRIDAY for FRI_SAT)

    Returns:
        Chronological list of (first_day, second_day) tuples
    """
    pairs = []
    for day in enumerate_dates(start, end):
        if weekday_index(day) == first_weekday:
            second = day + timedelta(days=1)
            if second <= end:
                pairs.append((day, second))
    return pairs


def longest_streak(days: Iterable[date]) -> int:
    """Length of the longest run of calendar-consecutive dates."""
    ordered = sorted(set(days))
    if not ordered:
        return 0
    best = streak = 1
    for prev, current in zip(ordered, ordered[1:]):
        if (current - prev).days == 1:
            streak += 1
            best = max(best, streak)
        else:
            streak = 1
    return best


def minutes_window(start: time, end: time) -> Tuple[int, int]:
    """Minutes since midnight; an end at or before the start wraps past midnight."""
    start_min = start.hour * 60 + start.minute
    end_min = end.hour * 60 + end.minute
    if end_min <= start_min:
        end_min += 24 * 60
    return start_min, end_min


def times_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    a0, a1 = minutes_window(start_a, end_a)
    b0, b1 = minutes_window(start_b, end_b)
    return a0 < b1 and b0 < a1
