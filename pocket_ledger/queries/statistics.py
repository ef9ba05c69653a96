"""
Ledger Statistics

DESIGN DECISION: Statistics are DETERMINISTIC folds over collections
the caller already loaded. Nothing here touches storage, so the same
numbers can be computed for a snapshot, an export or a test fixture.

Transfers move money between the user's own accounts. They are left
out of income, expense and category totals.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pocket_ledger.models.ledger import Account, AccountType, Transaction, TransactionType
from pocket_ledger.models.reports import CategoryTotal, NetWorthSummary, PeriodTotals


def _in_range(transaction: Transaction, start: Optional[date], end: Optional[date]) -> bool:
    day = transaction.date.date()
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class LedgerStatistics:
    """
    Aggregates for summary views.

    GUARANTEES:
    - Only counts data that was passed in
    - Archived accounts never count toward net worth
    - Open-ended ranges when start or end is None
    """

    def net_worth(self, accounts: Iterable[Account]) -> NetWorthSummary:
        """
        Assets minus liabilities over active accounts included in net worth.

        Debt accounts are liabilities at the absolute value of their balance,
        whichever sign it was recorded with.
        """
        assets = Decimal("0")
        liabilities = Decimal("0")
        count = 0

        for account in accounts:
            if account.is_archived or not account.include_in_net_worth:
                continue
            count += 1
            if account.type == AccountType.DEBT:
                liabilities += abs(account.current_balance)
            else:
                assets += account.current_balance

        return NetWorthSummary(
            total_assets=assets,
            total_liabilities=liabilities,
            net_worth=assets - liabilities,
            account_count=count,
        )

    def totals_by_category(
        self,
        transactions: Iterable[Transaction],
        transaction_type: TransactionType = TransactionType.EXPENSE,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[CategoryTotal]:
        """
        Per-category sums of one transaction type, largest first.

        Uncategorised transactions are grouped under category_id None.
        """
        if transaction_type == TransactionType.TRANSFER:
            raise ValueError("Category totals are only defined for income and expense")

        totals: dict[Optional[str], Decimal] = defaultdict(Decimal)
        counts: dict[Optional[str], int] = defaultdict(int)

        for transaction in transactions:
            if transaction.type != transaction_type or not _in_range(transaction, start, end):
                continue
            totals[transaction.category_id] += transaction.amount
            counts[transaction.category_id] += 1

        result = [
            CategoryTotal(category_id=category_id, total=total, transaction_count=counts[category_id])
            for category_id, total in totals.items()
        ]
        result.sort(key=lambda item: item.total, reverse=True)
        return result

    def period_totals(
        self,
        transactions: Iterable[Transaction],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PeriodTotals:
        """Income and expense sums for a date range, inclusive."""
        income = Decimal("0")
        expense = Decimal("0")

        for transaction in transactions:
            if not _in_range(transaction, start, end):
                continue
            if transaction.type == TransactionType.INCOME:
                income += transaction.amount
            elif transaction.type == TransactionType.EXPENSE:
                expense += transaction.amount

        return PeriodTotals(start=start, end=end, income=income, expense=expense)
