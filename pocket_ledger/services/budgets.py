"""
Budget Calculator

Derives spent, remaining, progress and alert state for budgets from the
transaction history. Nothing computed here is stored.

DESIGN DECISION: An explicit end_date always wins. Without one, a
monthly budget runs to the last day of its start month and a yearly
budget runs for one year from its start date.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from pocket_ledger.models.ledger import Budget, BudgetPeriod, Transaction, TransactionType
from pocket_ledger.models.reports import BudgetStatus


class BudgetCalculator:
    """Stateless budget arithmetic over in-memory collections."""

    def period_window(self, budget: Budget) -> tuple[date, date]:
        """Inclusive (start, end) dates the budget covers."""
        start = budget.start_date
        if budget.end_date is not None:
            return start, budget.end_date

        if budget.period_type == BudgetPeriod.YEARLY:
            try:
                anniversary = start.replace(year=start.year + 1)
            except ValueError:
                # Feb 29 start with no Feb 29 next year
                anniversary = date(start.year + 1, 3, 1)
            return start, anniversary - timedelta(days=1)

        last_day = calendar.monthrange(start.year, start.month)[1]
        return start, start.replace(day=last_day)

    def spent(self, budget: Budget, transactions: Iterable[Transaction]) -> Decimal:
        """Sum of expenses in the budget's category within its window."""
        start, end = self.period_window(budget)
        total = Decimal("0")
        for transaction in transactions:
            if (
                transaction.type == TransactionType.EXPENSE
                and transaction.category_id == budget.category_id
                and start <= transaction.date.date() <= end
            ):
                total += transaction.amount
        return total

    def remaining(self, budget: Budget, transactions: Iterable[Transaction]) -> Decimal:
        """amount - spent. Negative when overspent."""
        return budget.amount - self.spent(budget, transactions)

    def progress(self, budget: Budget, transactions: Iterable[Transaction]) -> float:
        """Fraction of the budget used, capped at 1. Zero for a zero budget."""
        return self._progress(budget.amount, self.spent(budget, transactions))

    def is_alerting(self, budget: Budget, transactions: Iterable[Transaction]) -> bool:
        return self._alerting(budget.alert_threshold, self.progress(budget, transactions))

    def current_period_budgets(
        self,
        budgets: Iterable[Budget],
        today: Optional[date] = None,
    ) -> list[Budget]:
        """
        Budgets whose period covers today.

        Monthly budgets match on calendar month of their start date.
        Yearly and custom budgets match when today falls in the window.
        """
        today = today or date.today()
        current = []
        for budget in budgets:
            if budget.period_type == BudgetPeriod.MONTHLY:
                start = budget.start_date
                if (start.year, start.month) == (today.year, today.month):
                    current.append(budget)
                continue

            start, end = self.period_window(budget)
            if start <= today <= end:
                current.append(budget)
        return current

    def summarize(self, budget: Budget, transactions: Iterable[Transaction]) -> BudgetStatus:
        """Every derived value for one budget in a single pass."""
        start, end = self.period_window(budget)
        spent = self.spent(budget, transactions)
        progress = self._progress(budget.amount, spent)

        return BudgetStatus(
            budget_id=budget.id,
            category_id=budget.category_id,
            period_start=start,
            period_end=end,
            amount=budget.amount,
            spent=spent,
            remaining=budget.amount - spent,
            progress=progress,
            alert_threshold=budget.alert_threshold,
            is_alerting=self._alerting(budget.alert_threshold, progress),
        )

    @staticmethod
    def _progress(amount: Decimal, spent: Decimal) -> float:
        if amount <= 0:
            return 0.0
        return min(float(spent / amount), 1.0)

    @staticmethod
    def _alerting(threshold: Optional[float], progress: float) -> bool:
        return threshold is not None and progress >= threshold
