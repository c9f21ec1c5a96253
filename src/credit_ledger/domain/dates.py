"""Calendar helpers for due dates and overdue counting.

All helpers work on ``datetime.date``. Day-of-month values above the length of
a month are clamped to its last day (a due day of 31 falls on Feb 28/29).
"""

from __future__ import annotations

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def due_date_in_month(year: int, month: int, due_day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def add_months(d: date, months: int, day: int | None = None) -> date:
    """
    Shift a date by whole months.

    Args:
        d: Starting date
        months: Number of months to add (may be negative)
        day: Day of month to land on; defaults to ``d.day``. Clamped to the
            length of the target month.

    Returns:
        The shifted date
    """
    shifted = d + relativedelta(months=months)
    return due_date_in_month(shifted.year, shifted.month, day if day is not None else d.day)


def next_due_date_after(today: date, due_day: int) -> date:
    """Next occurrence of ``due_day`` strictly after ``today``."""
    candidate = due_date_in_month(today.year, today.month, due_day)
    if candidate > today:
        return candidate
    return add_months(candidate, 1, day=due_day)


def previous_due_date(today: date, due_day: int) -> date:
    """Latest occurrence of ``due_day`` strictly before ``today``."""
    candidate = due_date_in_month(today.year, today.month, due_day)
    if candidate < today:
        return candidate
    return add_months(candidate, -1, day=due_day)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def days_overdue(today: date, due_day: int) -> int:
    """Days elapsed since this month's due date, 0 when it has not passed yet."""
    this_month_due = due_date_in_month(today.year, today.month, due_day)
    return max(0, days_between(this_month_due, today))
