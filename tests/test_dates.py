"""Tests for calendar helpers."""

from datetime import date, time

from staff_scheduler.dates import (
    FRIDAY,
    enumerate_dates,
    longest_streak,
    month_range,
    normalize_month,
    times_overlap,
    weekday_index,
    weekend_pairs,
)


def test_weekday_index_starts_on_sunday():
    assert weekday_index(date(2025, 3, 2)) == 0  # Sunday
    assert weekday_index(date(2025, 3, 3)) == 1  # Monday
    assert weekday_index(date(2025, 3, 1)) == 6  # Saturday


def test_normalize_month_accepts_several_forms():
    assert normalize_month("2025-02") == date(2025, 2, 1)
    assert normalize_month("2025-02-17") == date(2025, 2, 1)
    assert normalize_month(date(2025, 2, 28)) == date(2025, 2, 1)


def test_month_range_handles_leap_year():
    assert month_range(date(2024, 2, 1)) == (date(2024, 2, 1), date(2024, 2, 29))


def test_enumerate_dates_is_inclusive():
    days = list(enumerate_dates(date(2025, 3, 30), date(2025, 4, 1)))
    assert days == [date(2025, 3, 30), date(2025, 3, 31), date(2025, 4, 1)]
    assert list(enumerate_dates(date(2025, 4, 2), date(2025, 4, 1))) == []


def test_weekend_pairs_need_both_days_in_range():
    # March 2025 ends on Monday 31st; Saturday 29th + Sunday 30th still fit
    pairs = weekend_pairs(date(2025, 3, 1), date(2025, 3, 29))
    assert pairs[0] == (date(2025, 3, 1), date(2025, 3, 2))
    assert pairs[-1] == (date(2025, 3, 22), date(2025, 3, 23))
    assert len(pairs) == 4


def test_weekend_pairs_friday_start():
    pairs = weekend_pairs(date(2025, 3, 1), date(2025, 3, 10), first_weekday=FRIDAY)
    assert pairs == [(date(2025, 3, 7), date(2025, 3, 8))]


def test_longest_streak():
    assert longest_streak([]) == 0
    days = [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3), date(2025, 3, 5), date(2025, 3, 2)]
    assert longest_streak(days) == 3


def test_times_overlap_wraps_overnight():
    assert times_overlap(time(6), time(14), time(13), time(20))
    assert not times_overlap(time(6), time(14), time(14), time(22))
    # 16:00-00:00 runs to midnight, 23:00-07:00 starts before it ends
    assert times_overlap(time(16), time(0), time(23), time(7))
    assert not times_overlap(time(6), time(14), time(16), time(0))
