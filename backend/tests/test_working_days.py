"""Tests for working-day counting and leave sizing."""

from __future__ import annotations

from datetime import UTC, date, datetime

from approval_engine.services.working_days import calendar_days_inclusive, count_working_days, is_weekend


def test_friday_to_monday_counts_two() -> None:
    assert count_working_days(date(2023, 1, 6), date(2023, 1, 9)) == 2


def test_holiday_on_monday_is_skipped() -> None:
    holidays = {date(2023, 1, 9)}
    assert count_working_days(date(2023, 1, 6), date(2023, 1, 9), holidays.__contains__) == 1


def test_january_2023_has_22_working_days() -> None:
    assert count_working_days(date(2023, 1, 1), date(2023, 1, 31)) == 22


def test_single_weekday_counts_one() -> None:
    assert count_working_days(date(2023, 1, 4), date(2023, 1, 4)) == 1


def test_weekend_only_counts_zero() -> None:
    assert count_working_days(date(2023, 1, 7), date(2023, 1, 8)) == 0


def test_backwards_range_counts_zero() -> None:
    assert count_working_days(date(2023, 1, 9), date(2023, 1, 6)) == 0


def test_datetimes_are_reduced_to_dates() -> None:
    start = datetime(2023, 1, 6, 23, 59, tzinfo=UTC)
    end = datetime(2023, 1, 9, 0, 1, tzinfo=UTC)
    assert count_working_days(start, end) == 2


def test_is_weekend() -> None:
    assert is_weekend(date(2023, 1, 7))
    assert is_weekend(date(2023, 1, 8))
    assert not is_weekend(date(2023, 1, 9))


def test_calendar_days_inclusive() -> None:
    assert calendar_days_inclusive(date(2023, 1, 6), date(2023, 1, 9)) == 4
    assert calendar_days_inclusive(date(2023, 1, 6), date(2023, 1, 6)) == 1
    assert calendar_days_inclusive(date(2023, 1, 9), date(2023, 1, 6)) == 0
