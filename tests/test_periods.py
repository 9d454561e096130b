from datetime import date

import pytest

from weekly_reports import periods
from weekly_reports.periods import DateRange


def test_date_range_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        DateRange(date(2024, 1, 2), date(2024, 1, 1))


def test_date_range_contains_both_ends():
    r = DateRange(date(2024, 1, 1), date(2024, 1, 7))
    assert r.contains(date(2024, 1, 1))
    assert r.contains(date(2024, 1, 7))
    assert not r.contains(date(2024, 1, 8))


@pytest.mark.parametrize("today", [date(2024, 3, 18), date(2024, 3, 20), date(2024, 3, 24)])
def test_current_week_runs_monday_to_sunday(today):
    assert periods.current_week(today) == DateRange(date(2024, 3, 18), date(2024, 3, 24))


def test_previous_week():
    assert periods.previous_week(date(2024, 3, 20)) == DateRange(date(2024, 3, 11), date(2024, 3, 17))
    # crosses a year boundary
    assert periods.previous_week(date(2024, 1, 3)) == DateRange(date(2023, 12, 25), date(2023, 12, 31))


def test_specific_week():
    assert periods.specific_week(date(2024, 2, 26)) == DateRange(date(2024, 2, 26), date(2024, 3, 3))


def test_last_n_weeks_starts_on_monday_and_ends_today():
    today = date(2024, 3, 20)
    assert periods.last_n_weeks(4, today) == DateRange(date(2024, 2, 19), today)
    assert periods.last_n_weeks(1, today) == DateRange(date(2024, 3, 11), today)


def test_last_n_weeks_requires_positive_count():
    with pytest.raises(ValueError):
        periods.last_n_weeks(0, date(2024, 3, 20))


def test_month_handles_leap_february():
    assert periods.month(2024, 2) == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert periods.month(2023, 2) == DateRange(date(2023, 2, 1), date(2023, 2, 28))
    assert periods.month(2024, 12) == DateRange(date(2024, 12, 1), date(2024, 12, 31))


def test_month_rejects_out_of_range():
    with pytest.raises(ValueError):
        periods.month(2024, 13)


@pytest.mark.parametrize("q,start,end", [
    (1, date(2024, 1, 1), date(2024, 3, 31)),
    (2, date(2024, 4, 1), date(2024, 6, 30)),
    (3, date(2024, 7, 1), date(2024, 9, 30)),
    (4, date(2024, 10, 1), date(2024, 12, 31)),
])
def test_quarter(q, start, end):
    assert periods.quarter(2024, q) == DateRange(start, end)


def test_quarter_rejects_out_of_range():
    with pytest.raises(ValueError):
        periods.quarter(2024, 5)


def test_year():
    assert periods.year(2023) == DateRange(date(2023, 1, 1), date(2023, 12, 31))


def test_relative_periods():
    today = date(2024, 1, 17)
    assert periods.current_month(today) == DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert periods.previous_month(today) == DateRange(date(2023, 12, 1), date(2023, 12, 31))
    assert periods.current_quarter(date(2024, 8, 5)) == DateRange(date(2024, 7, 1), date(2024, 9, 30))
    assert periods.current_year(today) == DateRange(date(2024, 1, 1), date(2024, 12, 31))
