"""
Bill aggregation: resolve due dates, bucket bills into windows and total them.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from .models import Bill, DueBill
from .recurrence import next_occurrence, parse_date
from .windows import is_in_current_month, is_in_current_week, is_overdue

logger = logging.getLogger(__name__)

Window = Callable[[date, date], bool]


def due_bills_in_window(
    bills: Iterable[Bill],
    window: Window,
    reference_date: Optional[date] = None
) -> List[DueBill]:
    """
    Resolve each bill's due date and keep the ones that matter for a window.

    Overdue bills are always kept; other bills only when window(due_date,
    reference_date) holds. Bills whose start date cannot be parsed are
    dropped.

    Args:
        bills: Bills to evaluate (not modified)
        window: Predicate over (due_date, reference_date)
        reference_date: Date to evaluate against (defaults to today)

    Returns:
        Overdue bills first, then the rest by ascending due date
    """
    if reference_date is None:
        reference_date = date.today()

    overdue: List[DueBill] = []
    upcoming: List[DueBill] = []

    for bill in bills:
        due_date = next_occurrence(bill.start_date, bill.frequency, reference_date)
        if due_date is None:
            logger.warning(f"Skipping bill {bill.id}: unparseable start date {bill.start_date!r}")
            continue

        due_bill = DueBill(
            **bill.model_dump(exclude={"due_date", "is_overdue"}),
            due_date=due_date,
            is_overdue=is_overdue(due_date, reference_date)
        )
        if due_bill.is_overdue:
            overdue.append(due_bill)
        elif window(due_date, reference_date):
            upcoming.append(due_bill)

    upcoming.sort(key=lambda b: b.due_date)
    return overdue + upcoming


def total_amount(bills: Iterable[Bill]) -> Decimal:
    """Sum of bill amounts."""
    return sum((bill.amount for bill in bills), Decimal("0"))


def due_this_week(bills: Iterable[Bill], reference_date: Optional[date] = None) -> List[DueBill]:
    """Bills due in the current Monday-Sunday week, plus overdue bills."""
    return due_bills_in_window(bills, is_in_current_week, reference_date)


def due_this_month(bills: Iterable[Bill], reference_date: Optional[date] = None) -> List[DueBill]:
    """Bills due in the current calendar month, plus overdue bills. Status is ignored."""
    return due_bills_in_window(bills, is_in_current_month, reference_date)


def paid_this_month(bills: Iterable[Bill], reference_date: Optional[date] = None) -> List[Bill]:
    """Bills with a last paid date in the current calendar month."""
    if reference_date is None:
        reference_date = date.today()

    paid = []
    for bill in bills:
        if not bill.last_paid_date:
            continue
        paid_on = parse_date(bill.last_paid_date)
        if paid_on is None:
            logger.warning(f"Ignoring bill {bill.id}: unparseable last paid date {bill.last_paid_date!r}")
            continue
        if is_in_current_month(paid_on, reference_date):
            paid.append(bill)
    return paid


def unpaid_due_this_month(bills: Iterable[Bill], reference_date: Optional[date] = None) -> List[DueBill]:
    """Bills due this month (or overdue) that have not been paid this month."""
    bills = list(bills)
    paid_ids = {
        bill.id for bill in paid_this_month(bills, reference_date)
        if bill.id is not None
    }
    return [
        bill for bill in due_this_month(bills, reference_date)
        if bill.id not in paid_ids
    ]
