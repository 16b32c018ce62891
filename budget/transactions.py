"""
Spending aggregation over transactions.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import Transaction
from .recurrence import parse_date
from .windows import is_in_current_month, is_in_current_week, is_today

logger = logging.getLogger(__name__)

UNKNOWN_DATE = "Unknown"


def _in_window(
    transactions: Iterable[Transaction],
    window: Callable[[date, date], bool],
    reference_date: date
) -> List[Transaction]:
    matched = []
    for transaction in transactions:
        if not transaction.date:
            continue
        spent_on = parse_date(transaction.date)
        if spent_on is None:
            logger.warning(f"Skipping transaction {transaction.id}: unparseable date {transaction.date!r}")
            continue
        if window(spent_on, reference_date):
            matched.append(transaction)
    return matched


def _total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def today_spending(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> Decimal:
    """Total spent on the reference day."""
    if reference_date is None:
        reference_date = date.today()
    return _total(_in_window(transactions, is_today, reference_date))


def weekly_spending(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> Decimal:
    """Total spent in the current Monday-Sunday week."""
    if reference_date is None:
        reference_date = date.today()
    return _total(_in_window(transactions, is_in_current_week, reference_date))


def monthly_spending(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> Decimal:
    """Total spent in the current calendar month."""
    if reference_date is None:
        reference_date = date.today()
    return _total(_in_window(transactions, is_in_current_month, reference_date))


def average_daily_spending(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> Decimal:
    """
    Month-to-date spending divided by the day of the month.

    The divisor is the calendar day number (the 10th divides by 10).
    """
    if reference_date is None:
        reference_date = date.today()
    return monthly_spending(transactions, reference_date) / Decimal(reference_date.day)


def transaction_count_this_month(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> int:
    if reference_date is None:
        reference_date = date.today()
    return len(_in_window(transactions, is_in_current_month, reference_date))


def group_transactions_by_date(transactions: Iterable[Transaction]) -> List[Tuple[str, List[Transaction]]]:
    """
    Group transactions by calendar day (ISO date keys), newest day first.

    Transactions without a usable date are grouped under "Unknown", which
    always sorts last.
    """
    groups: Dict[str, List[Transaction]] = {}
    for transaction in transactions:
        spent_on = parse_date(transaction.date)
        key = spent_on.isoformat() if spent_on else UNKNOWN_DATE
        groups.setdefault(key, []).append(transaction)

    dated = [(key, items) for key, items in groups.items() if key != UNKNOWN_DATE]
    dated.sort(key=lambda group: group[0], reverse=True)

    if UNKNOWN_DATE in groups:
        dated.append((UNKNOWN_DATE, groups[UNKNOWN_DATE]))
    return dated


def filter_by_category(transactions: Iterable[Transaction], category: str) -> List[Transaction]:
    """Transactions in a category (case-insensitive)."""
    wanted = category.strip().lower()
    return [t for t in transactions if t.category.strip().lower() == wanted]


def filter_by_search_query(transactions: Iterable[Transaction], query: str) -> List[Transaction]:
    """Transactions whose description contains the query. An empty query matches all."""
    needle = query.strip().lower()
    if not needle:
        return list(transactions)
    return [t for t in transactions if needle in t.description.lower()]
