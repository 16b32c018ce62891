"""
Display formatting helpers for the finance application.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from budget.recurrence import parse_date


def format_currency(amount: Union[Decimal, float]) -> str:
    """Format currency amount with commas and 2 decimal places."""
    return f"${amount:,.2f}"


def format_display_date(value: Any) -> str:
    """Format a stored date as DD/MM/YYYY."""
    if not value:
        return "N/A"
    parsed = parse_date(value)
    if parsed is None:
        return "Invalid Date"
    return parsed.strftime("%d/%m/%Y")


def format_friendly_date(value: Any, reference_date: Optional[date] = None) -> str:
    """'Today', 'Yesterday', or DD/MM/YYYY. Empty string if the date is missing or invalid."""
    if reference_date is None:
        reference_date = date.today()

    parsed = parse_date(value) if value else None
    if parsed is None:
        return ""

    days_ago = (reference_date - parsed).days
    if days_ago == 0:
        return "Today"
    if days_ago == 1:
        return "Yesterday"
    return parsed.strftime("%d/%m/%Y")


def calculate_days_until(d: date, reference_date: Optional[date] = None) -> int:
    """Calculate days until a date."""
    if reference_date is None:
        reference_date = date.today()
    return (d - reference_date).days


def days_until_label(value: Any, reference_date: Optional[date] = None) -> str:
    """Countdown label for a pay or due date."""
    parsed = parse_date(value)
    if parsed is None:
        return "Date Error"

    days = calculate_days_until(parsed, reference_date)
    if days == 0:
        return "Pay due today"
    if days < 0:
        return "Payment overdue"
    return f"{days} days"
