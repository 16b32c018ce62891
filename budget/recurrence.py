"""
Recurrence calculations for bills and incomes.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .models import Frequency

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10_000

PERIODS: Dict[Frequency, Any] = {
    Frequency.WEEKLY: timedelta(weeks=1),
    Frequency.FORTNIGHTLY: timedelta(weeks=2),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.ANNUAL: relativedelta(months=12),
}


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a stored date into a calendar date.

    Accepts date/datetime objects or ISO 8601 text. Any time or offset part
    is dropped; the calendar date is taken as written.

    Returns:
        The calendar date, or None if the value is empty or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def advance(d: date, frequency: Any) -> date:
    """Move a date forward by one period. Non-recurring dates are returned as-is."""
    period = PERIODS.get(Frequency.parse(frequency))
    if period is None:
        return d
    return d + period


def next_occurrence(
    start_date: Any,
    frequency: Any,
    reference_date: Optional[date] = None,
    include_reference_day: bool = False
) -> Optional[date]:
    """
    Calculate the next occurrence of a schedule relative to a reference date.

    The result is the start date plus the smallest whole number of periods
    that lands after the reference date. Month-based periods clamp to the
    end of shorter months without losing the start date's day.
    With include_reference_day the advance stops once the reference date is
    reached, so an occurrence falling on the reference date is returned.

    Args:
        start_date: First occurrence (ISO text or date)
        frequency: Frequency label; one-time or unknown labels never advance
        reference_date: Date to measure from (defaults to today)
        include_reference_day: Keep an occurrence falling on the reference date

    Returns:
        Next occurrence, or None if the start date cannot be parsed
    """
    if reference_date is None:
        reference_date = date.today()

    start = parse_date(start_date)
    if start is None:
        return None

    period = PERIODS.get(Frequency.parse(frequency))
    if period is None:
        return start

    def elapsed(d: date) -> bool:
        if include_reference_day:
            return d < reference_date
        return d <= reference_date

    # Candidates are whole-period offsets from the start date, so a 31st
    # stays on the 31st or its month's last day.
    current = start
    steps = 0
    while elapsed(current):
        if steps >= MAX_ITERATIONS:
            logger.warning(
                f"Recurrence from {start_date} ({frequency}) hit the "
                f"{MAX_ITERATIONS} step limit; stopping at {current}"
            )
            break
        following = start + period * (steps + 1)
        if following <= current:
            logger.warning(f"Frequency {frequency!r} does not move {current} forward")
            break
        current = following
        steps += 1

    return current
