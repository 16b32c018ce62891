"""
Income aggregation over receipt dates and pay schedules.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .models import Income
from .recurrence import next_occurrence, parse_date
from .windows import is_in_current_month, is_in_current_week

logger = logging.getLogger(__name__)


def next_pay_date(income: Income, reference_date: Optional[date] = None) -> Optional[date]:
    """
    Next expected pay date for an income, or None if its start date is invalid.

    A payment falling on the reference date is reported as that date.
    """
    return next_occurrence(income.start_date, income.frequency, reference_date, include_reference_day=True)


def weekly_income(incomes: Iterable[Income], reference_date: Optional[date] = None) -> List[Income]:
    """
    Incomes received during the current week.

    Uses the most recent receipt date, not the scheduled pay date.
    """
    if reference_date is None:
        reference_date = date.today()

    received = []
    for income in incomes:
        if not income.date:
            continue
        received_on = parse_date(income.date)
        if received_on is None:
            logger.warning(f"Skipping income {income.id}: unparseable receipt date {income.date!r}")
            continue
        if is_in_current_week(received_on, reference_date):
            received.append(income)
    return received


def monthly_income(incomes: Iterable[Income], reference_date: Optional[date] = None) -> List[Income]:
    """Incomes whose next pay date falls in the current month."""
    if reference_date is None:
        reference_date = date.today()

    due = []
    for income in incomes:
        pay_date = next_pay_date(income, reference_date)
        if pay_date is None:
            logger.warning(f"Skipping income {income.id}: unparseable start date {income.start_date!r}")
            continue
        if is_in_current_month(pay_date, reference_date):
            due.append(income)
    return due


def income_total(incomes: Iterable[Income]) -> Decimal:
    return sum((income.amount for income in incomes), Decimal("0"))
