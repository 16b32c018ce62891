"""
Tests for income aggregation.
"""
import logging
from datetime import date
from decimal import Decimal

from app.utils import days_until_label
from budget.income import income_total, monthly_income, next_pay_date, weekly_income
from budget.models import Income

WEDNESDAY = date(2024, 1, 10)


def make_income(income_id, amount, start_date="2024-01-05", frequency="Fortnightly", received=None):
    return Income(id=income_id, amount=Decimal(str(amount)), description=income_id,
                  frequency=frequency, start_date=start_date, date=received)


def test_weekly_income_uses_receipt_date():
    """Test that only incomes received this week count, whatever their schedule."""
    incomes = [
        make_income("salary", 1500, start_date="2023-06-02", received="2024-01-08"),
        make_income("side", 200, start_date="2024-01-12", received="2024-01-14"),
        make_income("last-week", 300, received="2024-01-07"),
        make_income("never", 50),
    ]
    result = weekly_income(incomes, WEDNESDAY)

    assert [i.id for i in result] == ["salary", "side"]
    assert income_total(result) == Decimal("1700")


def test_weekly_income_skips_bad_receipt_date(caplog):
    """Test that an unparseable receipt date is skipped with a warning."""
    incomes = [make_income("bad", 100, received="last friday"), make_income("ok", 10, received="2024-01-09")]

    with caplog.at_level(logging.WARNING, logger="budget.income"):
        result = weekly_income(incomes, WEDNESDAY)

    assert [i.id for i in result] == ["ok"]
    assert "bad" in caplog.text


def test_next_pay_date():
    """Test pay dates follow the income schedule."""
    assert next_pay_date(make_income("a", 1, "2024-01-05", "Fortnightly"), WEDNESDAY) == date(2024, 1, 19)
    assert next_pay_date(make_income("b", 1, "2023-12-28", "Monthly"), WEDNESDAY) == date(2024, 1, 28)
    assert next_pay_date(make_income("c", 1, "2024-03-01", "One Time"), WEDNESDAY) == date(2024, 3, 1)
    assert next_pay_date(make_income("d", 1, "soon", "Weekly"), WEDNESDAY) is None


def test_pay_date_due_today_is_today():
    """Test that an income paid on the reference date shows as due today."""
    monday = date(2024, 1, 8)
    pay_date = next_pay_date(make_income("wage", 900, "2024-01-01", "Weekly"), monday)

    assert pay_date == monday
    assert days_until_label(pay_date, monday) == "Pay due today"
    assert next_pay_date(make_income("wage", 900, "2024-01-01", "Weekly"), date(2024, 1, 9)) == date(2024, 1, 15)


def test_monthly_income():
    """Test incomes whose next pay date falls this month."""
    incomes = [
        make_income("jan", 1000, "2023-12-28", "Monthly"),      # next 2024-01-28
        make_income("feb", 1000, "2023-12-05", "Monthly"),      # next 2024-02-05
        make_income("bonus", 250, "2024-01-31", "One Time"),
        make_income("broken", 999, "n/a", "Monthly"),
    ]
    result = monthly_income(incomes, WEDNESDAY)
    assert [i.id for i in result] == ["jan", "bonus"]


def test_empty_income():
    """Test empty input."""
    assert weekly_income([], WEDNESDAY) == []
    assert monthly_income([], WEDNESDAY) == []
    assert income_total([]) == Decimal("0")
