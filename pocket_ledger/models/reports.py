"""
Derived report models.

Nothing here is persisted. These are computed on read from the
stored collections by the budget calculator and ledger statistics.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class BudgetStatus(BaseModel):
    """Spending state of one budget within its period window."""

    budget_id: str
    category_id: str
    period_start: date
    period_end: date
    amount: Decimal
    spent: Decimal = Field(
        ...,
        ge=0,
        description="Sum of matching expenses in the window"
    )
    remaining: Decimal = Field(
        ...,
        description="amount - spent; negative when overspent"
    )
    progress: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="spent / amount, capped at 1"
    )
    alert_threshold: Optional[float] = None
    is_alerting: bool = False

    @property
    def is_overspent(self) -> bool:
        return self.spent > self.amount


class NetWorthSummary(BaseModel):
    """Assets, liabilities and their difference across accounts."""

    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal
    account_count: int = Field(ge=0)


class CategoryTotal(BaseModel):
    """Sum of transactions for one category in a period."""

    category_id: Optional[str] = Field(
        default=None,
        description="None groups uncategorised transactions"
    )
    total: Decimal
    transaction_count: int = Field(ge=0)


class PeriodTotals(BaseModel):
    """Income and expense totals for a date range. Transfers are excluded."""

    start: Optional[date] = None
    end: Optional[date] = None
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense
