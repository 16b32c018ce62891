"""
Savings goal totals and progress.
"""
from decimal import Decimal
from typing import Iterable

from .models import SavingsGoal


def total_savings(goals: Iterable[SavingsGoal]) -> Decimal:
    """Sum of what has been saved across all goals."""
    return sum((goal.current_amount for goal in goals), Decimal("0"))


def goal_progress(goal: SavingsGoal) -> Decimal:
    """Fraction of the target reached, between 0 and 1."""
    if goal.target_amount <= 0:
        return Decimal("0")
    return min(goal.current_amount / goal.target_amount, Decimal("1"))


def remaining_to_target(goal: SavingsGoal) -> Decimal:
    return max(goal.target_amount - goal.current_amount, Decimal("0"))
