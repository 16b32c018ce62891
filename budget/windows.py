"""
Calendar windows used to bucket records. Weeks start on Monday.
"""
from datetime import date, timedelta
from typing import Optional


def _today(reference_date: Optional[date]) -> date:
    return date.today() if reference_date is None else reference_date


def week_start(reference_date: Optional[date] = None) -> date:
    """Monday of the reference date's week."""
    ref = _today(reference_date)
    return ref - timedelta(days=ref.weekday())


def week_end(reference_date: Optional[date] = None) -> date:
    """Sunday of the reference date's week."""
    return week_start(reference_date) + timedelta(days=6)


def is_today(d: date, reference_date: Optional[date] = None) -> bool:
    return d == _today(reference_date)


def is_overdue(d: date, reference_date: Optional[date] = None) -> bool:
    """True when the date is strictly before the reference day."""
    return d < _today(reference_date)


def is_in_current_week(d: date, reference_date: Optional[date] = None) -> bool:
    return week_start(reference_date) <= d <= week_end(reference_date)


def is_in_current_month(d: date, reference_date: Optional[date] = None) -> bool:
    ref = _today(reference_date)
    return d.year == ref.year and d.month == ref.month


def current_week_of_month(reference_date: Optional[date] = None) -> int:
    """
    Which week of the month the reference date falls in (1-based).

    Counts Monday-start weeks, so the days of the month before its first
    Monday make up week 1.
    """
    ref = _today(reference_date)
    first_of_month = ref.replace(day=1)
    return (week_start(ref) - week_start(first_of_month)).days // 7 + 1


def week_date_range(reference_date: Optional[date] = None) -> str:
    """Label for the current week, e.g. '9 Dec - 15 Dec'."""
    monday = week_start(reference_date)
    sunday = week_end(reference_date)
    return f"{monday.day} {monday:%b} - {sunday.day} {sunday:%b}"
