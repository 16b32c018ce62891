"""
Tests for calendar window predicates.
"""
import pytest
from datetime import date

from budget.windows import (
    current_week_of_month, is_in_current_month, is_in_current_week,
    is_overdue, is_today, week_date_range, week_end, week_start
)


@pytest.mark.parametrize(
    "reference,monday,sunday",
    [
        (date(2024, 1, 8), date(2024, 1, 8), date(2024, 1, 14)),    # Monday
        (date(2024, 1, 10), date(2024, 1, 8), date(2024, 1, 14)),   # Wednesday
        (date(2024, 1, 14), date(2024, 1, 8), date(2024, 1, 14)),   # Sunday
        (date(2024, 1, 31), date(2024, 1, 29), date(2024, 2, 4)),   # spans months
        (date(2025, 1, 1), date(2024, 12, 30), date(2025, 1, 5)),   # spans years
    ],
)
def test_week_bounds_start_on_monday(reference, monday, sunday):
    """Test that weeks run Monday to Sunday."""
    assert week_start(reference) == monday
    assert week_end(reference) == sunday


def test_is_in_current_week_boundaries():
    """Test inclusive Monday and Sunday boundaries."""
    reference = date(2024, 1, 10)
    assert is_in_current_week(date(2024, 1, 8), reference)
    assert is_in_current_week(date(2024, 1, 14), reference)
    assert not is_in_current_week(date(2024, 1, 7), reference)
    assert not is_in_current_week(date(2024, 1, 15), reference)


def test_is_today():
    """Test day equality against the reference date."""
    assert is_today(date(2024, 1, 10), date(2024, 1, 10))
    assert not is_today(date(2024, 1, 11), date(2024, 1, 10))


def test_is_overdue_is_strict():
    """Test that a date equal to the reference day is not overdue."""
    reference = date(2024, 1, 10)
    assert is_overdue(date(2024, 1, 9), reference)
    assert not is_overdue(date(2024, 1, 10), reference)
    assert not is_overdue(date(2024, 1, 11), reference)


def test_is_in_current_month_checks_year():
    """Test that the same month in another year does not match."""
    reference = date(2024, 1, 15)
    assert is_in_current_month(date(2024, 1, 1), reference)
    assert is_in_current_month(date(2024, 1, 31), reference)
    assert not is_in_current_month(date(2023, 1, 15), reference)
    assert not is_in_current_month(date(2024, 2, 1), reference)


@pytest.mark.parametrize(
    "reference,expected",
    [
        (date(2024, 1, 1), 1),
        (date(2024, 1, 7), 1),
        (date(2024, 1, 8), 2),
        (date(2024, 1, 31), 5),
        (date(2024, 2, 1), 1),   # Thursday; the week began in January
        (date(2024, 2, 4), 1),
        (date(2024, 2, 5), 2),
    ],
)
def test_current_week_of_month(reference, expected):
    """Test week-of-month numbering with Monday-start weeks."""
    assert current_week_of_month(reference) == expected


def test_week_date_range_label():
    """Test the human-readable week range."""
    assert week_date_range(date(2024, 12, 11)) == "9 Dec - 15 Dec"
    assert week_date_range(date(2024, 1, 31)) == "29 Jan - 4 Feb"


def test_defaults_use_today():
    """Test that predicates default to the current date."""
    today = date.today()
    assert is_today(today)
    assert is_in_current_week(today)
    assert is_in_current_month(today)
    assert not is_overdue(today)
