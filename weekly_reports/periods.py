"""Calendar queries translated into inclusive date ranges.

Weeks run Monday through Sunday. Functions that depend on the current day take
it as an argument so callers (and tests) control the clock.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

SUNDAY = 6


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def week_start(day: date) -> date:
    """Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    """Sunday on or after ``day``."""
    return day + timedelta(days=SUNDAY - day.weekday())


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def current_week(today: date) -> DateRange:
    return DateRange(week_start(today), week_end(today))


def previous_week(today: date) -> DateRange:
    start = week_start(today - timedelta(weeks=1))
    return DateRange(start, week_end(start))


def specific_week(start: date) -> DateRange:
    """The week beginning at ``start`` (normally a Monday) through the next Sunday."""
    return DateRange(start, week_end(start))


def last_n_weeks(n: int, today: date) -> DateRange:
    if n < 1:
        raise ValueError(f"Number of weeks must be at least 1, got {n}")
    return DateRange(week_start(today - timedelta(weeks=n)), today)


def month(year: int, month_number: int) -> DateRange:
    if not 1 <= month_number <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month_number}")
    last_day = calendar.monthrange(year, month_number)[1]
    return DateRange(date(year, month_number, 1), date(year, month_number, last_day))


def quarter(year: int, quarter_number: int) -> DateRange:
    if not 1 <= quarter_number <= 4:
        raise ValueError(f"Quarter must be between 1 and 4, got {quarter_number}")
    start = date(year, (quarter_number - 1) * 3 + 1, 1)
    return DateRange(start, _add_months(start, 3) - timedelta(days=1))


def year(year_number: int) -> DateRange:
    return DateRange(date(year_number, 1, 1), date(year_number, 12, 31))


def current_month(today: date) -> DateRange:
    return month(today.year, today.month)


def previous_month(today: date) -> DateRange:
    last_month = _add_months(today.replace(day=1), -1)
    return month(last_month.year, last_month.month)


def current_quarter(today: date) -> DateRange:
    return quarter(today.year, (today.month - 1) // 3 + 1)


def current_year(today: date) -> DateRange:
    return year(today.year)


def all_time() -> DateRange:
    return DateRange(date.min, date.max)
