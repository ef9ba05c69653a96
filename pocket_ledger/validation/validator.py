"""
Reference Validation

DESIGN DECISION: Model validation (pydantic) checks what a transaction
can verify about itself: positive amount, transfer accounts present and
distinct. This stage checks what needs storage: that the accounts and
category a transaction points at exist and are usable.

Runs at the transaction repository boundary, before anything is
written. The balance engine itself keeps skipping unresolved ids, so
stale data already on disk never raises.

IMPORTANT: Validation NEVER silently fixes issues.
Every problem found is reported together in one error.
"""

from typing import TYPE_CHECKING, Optional

from pocket_ledger.models.ledger import CategoryType, Transaction, TransactionType

if TYPE_CHECKING:
    from pocket_ledger.repositories.accounts import AccountRepository
    from pocket_ledger.repositories.categories import CategoryRepository


class TransactionValidationError(ValueError):
    """A transaction references accounts or categories it may not use."""

    def __init__(self, issues: list[str]):
        self.issues = issues
        super().__init__("; ".join(issues))


_CATEGORY_TYPE_FOR = {
    TransactionType.INCOME: CategoryType.INCOME,
    TransactionType.EXPENSE: CategoryType.EXPENSE,
}


class TransactionValidator:
    """
    Checks a transaction's references against stored accounts and categories.
    """

    def __init__(
        self,
        account_repository: "AccountRepository",
        category_repository: Optional["CategoryRepository"] = None,
    ):
        """
        Args:
            account_repository: Source of accounts to resolve against
            category_repository: Source of categories. If None, category
                                 checks are skipped.
        """
        self._accounts = account_repository
        self._categories = category_repository

    async def check(self, transaction: Transaction) -> list[str]:
        """
        Collect every reference problem without raising.

        Returns: list of issue messages, empty when valid
        """
        issues = []

        accounts = {account.id: account for account in await self._accounts.get_all_strict()}
        if transaction.type == TransactionType.TRANSFER:
            referenced = [
                ("Source account", transaction.from_account_id),
                ("Destination account", transaction.to_account_id),
            ]
        else:
            referenced = [("Account", transaction.account_id)]

        for label, account_id in referenced:
            account = accounts.get(account_id)
            if account is None:
                issues.append(f"{label} {account_id} does not exist")
            elif account.is_archived:
                issues.append(f"{label} {account_id} is archived")

        if transaction.category_id and self._categories is not None:
            issues.extend(await self._check_category(transaction))

        return issues

    async def validate(self, transaction: Transaction) -> None:
        """
        Raises:
            TransactionValidationError: If any reference is invalid
        """
        issues = await self.check(transaction)
        if issues:
            raise TransactionValidationError(issues)

    async def _check_category(self, transaction: Transaction) -> list[str]:
        category = await self._categories.get_by_id(transaction.category_id)
        if category is None:
            return [f"Category {transaction.category_id} does not exist"]

        expected = _CATEGORY_TYPE_FOR.get(transaction.type)
        # Transfers may carry any category
        if expected is not None and category.type != expected:
            return [
                f"Category {category.name} is an {category.type.value} category "
                f"and cannot be used on an {transaction.type.value}"
            ]
        return []
