"""
Weekly budget planning and dashboard composition.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .bills import due_this_month, due_this_week, total_amount
from .income import income_total, weekly_income
from .models import Bill, DashboardSummary, Income, Transaction, WeeklyPlan
from .transactions import weekly_spending
from .windows import current_week_of_month, week_date_range

# Every month is budgeted as exactly four weeks.
WEEKS_PER_MONTH = Decimal("4")


def weekly_plan(bills: Iterable[Bill], reference_date: Optional[date] = None) -> WeeklyPlan:
    """
    Recommend how much to set aside for bills this week.

    The target is the month's bill total spread over four weeks, raised to
    the total actually due this week when that is larger. Whatever the
    target exceeds this week's bills by is banked as a buffer towards later
    bills in the month.

    Args:
        bills: All of the user's bills
        reference_date: Date to plan for (defaults to today)

    Returns:
        WeeklyPlan with targets, buffer and the bills due this week
    """
    if reference_date is None:
        reference_date = date.today()
    bills = list(bills)

    weekly_average_target = total_amount(due_this_month(bills, reference_date)) / WEEKS_PER_MONTH

    bills_due_this_week = due_this_week(bills, reference_date)
    bills_due_this_week_total = total_amount(bills_due_this_week)

    final_weekly_target = max(weekly_average_target, bills_due_this_week_total)

    return WeeklyPlan(
        weekly_average_target=weekly_average_target,
        bills_due_this_week_total=bills_due_this_week_total,
        final_weekly_target=final_weekly_target,
        buffer_contribution=final_weekly_target - bills_due_this_week_total,
        bills_due_this_week=bills_due_this_week
    )


def build_dashboard(
    incomes: Iterable[Income],
    bills: Iterable[Bill],
    transactions: Iterable[Transaction],
    reference_date: Optional[date] = None
) -> DashboardSummary:
    """Derive the weekly dashboard figures from raw records."""
    if reference_date is None:
        reference_date = date.today()

    plan = weekly_plan(bills, reference_date)
    income_this_week = income_total(weekly_income(incomes, reference_date))
    spending_this_week = weekly_spending(transactions, reference_date)
    # TODO: derive from savings goals once goals carry a contribution schedule
    savings_contribution = Decimal("0")

    available_balance = (
        income_this_week
        - plan.bills_due_this_week_total
        - savings_contribution
        - spending_this_week
    )

    return DashboardSummary(
        weekly_income=income_this_week,
        bills_due_this_week_total=plan.bills_due_this_week_total,
        weekly_savings_contribution=savings_contribution,
        weekly_spending=spending_this_week,
        available_balance=available_balance,
        plan=plan,
        week_range=week_date_range(reference_date),
        week_of_month=current_week_of_month(reference_date)
    )
