"""Tests for weekend-off planning."""

from collections import namedtuple
from datetime import date

from staff_scheduler.services.eligibility import TimeOffSpan
from staff_scheduler.services.weekends import has_locked_assignment, plan_weekend_off

KeptShift = namedtuple("KeptShift", "id date shift_code")

START = date(2025, 3, 1)
END = date(2025, 3, 31)
FIRST = {date(2025, 3, 1), date(2025, 3, 2)}
SECOND = {date(2025, 3, 8), date(2025, 3, 9)}


def test_everyone_gets_first_free_weekend():
    blocked = plan_weekend_off([1, 2], {}, [], {}, START, END)
    assert blocked == {1: FIRST, 2: FIRST}


def test_weekend_time_off_means_no_reservation():
    time_off = {1: [TimeOffSpan(1, date(2025, 3, 14), date(2025, 3, 17))]}
    blocked = plan_weekend_off([1], time_off, [], {}, START, END)
    assert blocked == {1: set()}


def test_partial_weekend_time_off_skips_that_weekend():
    time_off = {1: [TimeOffSpan(1, date(2025, 3, 2), date(2025, 3, 2))]}
    blocked = plan_weekend_off([1], time_off, [], {}, START, END)
    assert blocked == {1: SECOND}


def test_locked_weekend_work_skips_that_weekend():
    kept = [KeptShift(10, date(2025, 3, 2), "AFTERNOON"), KeptShift(11, date(2025, 3, 1), "NIGHT")]
    locked = {10: {1}, 11: {2}}

    blocked = plan_weekend_off([1, 2], {}, kept, locked, START, END)

    # NIGHT is not one of the inspected codes
    assert blocked == {1: SECOND, 2: FIRST}
    assert has_locked_assignment(1, date(2025, 3, 2), kept, locked)
    assert not has_locked_assignment(2, date(2025, 3, 1), kept, locked)
    assert has_locked_assignment(2, date(2025, 3, 1), kept, locked, lock_codes=("NIGHT",))


def test_window_without_full_weekend_reserves_nothing():
    blocked = plan_weekend_off([1], {}, [], {}, date(2025, 3, 2), date(2025, 3, 7))
    assert blocked == {1: set()}
