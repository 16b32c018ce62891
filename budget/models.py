"""
Budget models for bills, incomes, transactions and savings goals.
"""
from typing import List, Optional, Any
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class Frequency(str, Enum):
    """Recurrence cadence for bills and incomes."""
    WEEKLY = "Weekly"
    FORTNIGHTLY = "Fortnightly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUAL = "Annual"
    ONE_TIME = "OneTime"

    @classmethod
    def parse(cls, label: Any) -> Optional["Frequency"]:
        """
        Resolve a stored frequency label.

        Matching ignores case, spaces, hyphens and underscores, so
        "One Time", "One-Time" and "monthly" all resolve. Returns None for
        anything unrecognised.
        """
        if isinstance(label, Frequency):
            return label
        if not isinstance(label, str):
            return None
        key = label.replace(" ", "").replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class BillStatus(str, Enum):
    """Payment status of a bill."""
    PAID = "paid"
    UNPAID = "unpaid"


def _iso_text(value: Any) -> Any:
    """Store date-like values as ISO text; leave everything else untouched."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class Bill(BaseModel):
    """A bill or recurring expense."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    description: str = ""
    frequency: str = Field(Frequency.MONTHLY.value, description="Frequency label as stored")
    start_date: Optional[str] = Field(None, description="ISO date of the first occurrence")
    status: BillStatus = Field(BillStatus.UNPAID)
    last_paid_date: Optional[str] = None
    date: Optional[str] = None

    @field_validator('start_date', 'last_paid_date', 'date', mode='before')
    @classmethod
    def dates_as_iso_text(cls, v):
        return _iso_text(v)


class Income(BaseModel):
    """An income stream with its most recent receipt date."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    description: str = ""
    frequency: str = Field(Frequency.MONTHLY.value)
    start_date: Optional[str] = None
    date: Optional[str] = Field(None, description="Date the income was last received")

    @field_validator('start_date', 'date', mode='before')
    @classmethod
    def dates_as_iso_text(cls, v):
        return _iso_text(v)


class Transaction(BaseModel):
    """A single point-in-time spending record."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    description: str = ""
    amount: Decimal
    category: str = ""
    date: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def date_as_iso_text(cls, v):
        return _iso_text(v)


class SavingsGoal(BaseModel):
    """A savings goal and how much has been put towards it."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)


class DueBill(Bill):
    """A bill resolved against a reference date."""
    due_date: date
    is_overdue: bool = False


class WeeklyPlan(BaseModel):
    """Recommended weekly set-aside for bills."""
    weekly_average_target: Decimal
    bills_due_this_week_total: Decimal
    final_weekly_target: Decimal
    buffer_contribution: Decimal
    bills_due_this_week: List[DueBill] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    """Figures shown on the weekly dashboard."""
    weekly_income: Decimal
    bills_due_this_week_total: Decimal
    weekly_savings_contribution: Decimal = Decimal("0")
    weekly_spending: Decimal
    available_balance: Decimal
    plan: WeeklyPlan
    week_range: str
    week_of_month: int
