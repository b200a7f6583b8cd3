"""Month-window helpers for the calendar grid.

Weekday numbers follow `date.weekday()` (Monday = 0 ... Sunday = 6).
"""

import calendar
from datetime import date

DAYS_IN_WEEK = 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def last_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def add_months(d: date, delta: int) -> date:
    """Return the 1st of the month `delta` calendar months away from d's month."""
    month_index = d.year * 12 + (d.month - 1) + delta
    year, month_zero = divmod(month_index, 12)
    return date(year, month_zero + 1, 1)


def leading_padding(year: int, month: int, first_weekday: int = 6) -> int:
    """Blank cells needed before the 1st so it lands under its weekday column."""
    return (date(year, month, 1).weekday() - first_weekday) % DAYS_IN_WEEK

