"""
Tests for the weekly budget planner and dashboard composition.
"""
import pytest
from datetime import date
from decimal import Decimal

from budget.models import Bill, Income, Transaction
from budget.planner import WEEKS_PER_MONTH, build_dashboard, weekly_plan

MONDAY = date(2024, 1, 8)


def make_bill(bill_id, amount, start_date, frequency="Monthly"):
    return Bill(id=bill_id, amount=Decimal(str(amount)), description=bill_id,
                frequency=frequency, start_date=start_date)


def test_week_with_bill_above_average():
    """Test that the target rises to what is concretely due this week."""
    bills = [
        make_bill("phone", 80, "2023-12-10"),      # due 2024-01-10
        make_bill("internet", 100, "2023-12-20"),  # due 2024-01-20
        make_bill("insurance", 120, "2023-12-25"), # due 2024-01-25
    ]
    plan = weekly_plan(bills, MONDAY)

    assert plan.weekly_average_target == Decimal("75.00")
    assert plan.bills_due_this_week_total == Decimal("80.00")
    assert plan.final_weekly_target == Decimal("80.00")
    assert plan.buffer_contribution == Decimal("0")
    assert [b.id for b in plan.bills_due_this_week] == ["phone"]


def test_week_without_bills_banks_average():
    """Test that a quiet week sets aside the smoothed average as buffer."""
    bills = [
        make_bill("internet", 200, "2023-12-20"),
        make_bill("insurance", 200, "2023-12-25"),
    ]
    plan = weekly_plan(bills, MONDAY)

    assert plan.weekly_average_target == Decimal("100.00")
    assert plan.bills_due_this_week_total == Decimal("0")
    assert plan.final_weekly_target == Decimal("100.00")
    assert plan.buffer_contribution == Decimal("100.00")
    assert plan.bills_due_this_week == []


def test_bills_outside_month_do_not_count():
    """Test that next month's bills are not part of the monthly average."""
    bills = [
        make_bill("car", 400, "2023-12-01"),   # due 2024-02-01
        make_bill("gym", 40, "2023-12-20"),    # due 2024-01-20
    ]
    plan = weekly_plan(bills, MONDAY)
    assert plan.weekly_average_target == Decimal("10")


def test_invalid_bill_excluded_from_plan():
    """Test that a bill with a bad start date contributes nothing."""
    bills = [make_bill("bad", 1000, "not-a-date"), make_bill("phone", 80, "2023-12-10")]
    plan = weekly_plan(bills, MONDAY)

    assert plan.weekly_average_target == Decimal("20")
    assert plan.bills_due_this_week_total == Decimal("80")
    assert all(b.id != "bad" for b in plan.bills_due_this_week)


def test_empty_bills():
    """Test that no bills gives a zero plan."""
    plan = weekly_plan([], MONDAY)
    assert plan.weekly_average_target == Decimal("0")
    assert plan.bills_due_this_week_total == Decimal("0")
    assert plan.final_weekly_target == Decimal("0")
    assert plan.buffer_contribution == Decimal("0")
    assert plan.bills_due_this_week == []


def test_weeks_per_month_is_four():
    """Test the smoothing constant."""
    assert WEEKS_PER_MONTH == 4


@pytest.mark.parametrize(
    "bills",
    [
        [make_bill("a", 500, "2024-01-12", frequency="OneTime")],
        [make_bill("a", 10, "2023-12-11"), make_bill("b", 990, "2023-12-28")],
        [make_bill("a", 25, "2024-01-01", frequency="Weekly"), make_bill("b", 60, "2023-12-31")],
        [make_bill("missed", 70, "2023-12-01", frequency="OneTime"), make_bill("b", 15, "2023-10-09")],
        [make_bill("a", "33.33", "2023-11-14", frequency="Quarterly")],
    ],
)
def test_plan_invariants(bills):
    """Test the lower bounds and non-negative buffer."""
    plan = weekly_plan(bills, MONDAY)

    assert plan.final_weekly_target >= plan.bills_due_this_week_total
    assert plan.final_weekly_target >= plan.weekly_average_target
    assert plan.buffer_contribution == plan.final_weekly_target - plan.bills_due_this_week_total
    assert plan.buffer_contribution >= 0


def test_plan_is_idempotent():
    """Test that repeated calls with the same reference date agree."""
    bills = [make_bill("phone", 80, "2023-12-10"), make_bill("internet", 100, "2023-12-20")]
    assert weekly_plan(bills, MONDAY) == weekly_plan(bills, MONDAY)


def test_build_dashboard_available_balance():
    """Test available balance = income - bills due - savings - spending."""
    incomes = [
        Income(id="pay", amount=Decimal("1000"), frequency="Fortnightly",
               start_date="2023-12-29", date="2024-01-08"),
        Income(id="old", amount=Decimal("500"), frequency="Monthly",
               start_date="2023-12-01", date="2024-01-01"),
    ]
    bills = [make_bill("phone", 80, "2023-12-10"), make_bill("internet", 100, "2023-12-20")]
    transactions = [
        Transaction(id="t1", amount=Decimal("12.50"), category="Food", date="2024-01-08"),
        Transaction(id="t2", amount=Decimal("7.50"), category="Food", date="2024-01-14"),
        Transaction(id="t3", amount=Decimal("99"), category="Food", date="2024-01-07"),
    ]

    summary = build_dashboard(incomes, bills, transactions, MONDAY)

    assert summary.weekly_income == Decimal("1000")
    assert summary.bills_due_this_week_total == Decimal("80")
    assert summary.weekly_savings_contribution == Decimal("0")
    assert summary.weekly_spending == Decimal("20.00")
    assert summary.available_balance == Decimal("900.00")
    assert summary.plan.final_weekly_target == Decimal("80")
    assert summary.week_range == "8 Jan - 14 Jan"
    assert summary.week_of_month == 2


def test_build_dashboard_empty():
    """Test an empty dashboard."""
    summary = build_dashboard([], [], [], MONDAY)
    assert summary.available_balance == Decimal("0")
    assert summary.weekly_income == Decimal("0")
    assert summary.weekly_spending == Decimal("0")
