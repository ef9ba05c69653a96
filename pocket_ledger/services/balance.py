"""
Balance Engine

Keeps every account's current_balance equal to its opening_balance plus
the effect of every stored transaction touching it.

Effects by transaction type (revert is the exact negation):

    income    account_id        += amount
    expense   account_id        -= amount
    transfer  from_account_id   -= amount
              to_account_id     += amount

DESIGN DECISION: The hot path never reads transaction history. Adds,
edits and deletes apply deltas only. recalculate_all_balances() is the
authoritative repair path: it folds the full history from each
opening_balance and overwrites every account.

Account ids that do not resolve are skipped without error, and the
other side of a transfer is still applied. Archived accounts keep
receiving updates.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from pocket_ledger.audit import AuditLogger
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Account, Transaction, TransactionType

if TYPE_CHECKING:
    from pocket_ledger.repositories.accounts import AccountRepository


# =============================================================================
# PURE FUNCTIONS
# =============================================================================

def transaction_effects(transaction: Transaction) -> list[tuple[Optional[str], Decimal]]:
    """
    The (account_id, delta) pairs produced by applying a transaction.
    """
    amount = transaction.amount
    if transaction.type == TransactionType.INCOME:
        return [(transaction.account_id, amount)]
    if transaction.type == TransactionType.EXPENSE:
        return [(transaction.account_id, -amount)]
    return [
        (transaction.from_account_id, -amount),
        (transaction.to_account_id, amount),
    ]


def _adjust(accounts: list[Account], effects: Iterable[tuple[Optional[str], Decimal]]) -> list[str]:
    by_id = {account.id: account for account in accounts}
    touched = []
    for account_id, delta in effects:
        account = by_id.get(account_id) if account_id else None
        if account is None:
            continue
        account.current_balance += delta
        touched.append(account.id)
    return touched


def apply_transaction(accounts: list[Account], transaction: Transaction) -> list[str]:
    """
    Add a transaction's effect to the accounts, in place.

    Returns:
        Ids of the accounts whose balance changed
    """
    return _adjust(accounts, transaction_effects(transaction))


def revert_transaction(accounts: list[Account], transaction: Transaction) -> list[str]:
    """
    Remove a previously applied transaction's effect, in place.

    Returns:
        Ids of the accounts whose balance changed
    """
    return _adjust(
        accounts,
        ((account_id, -delta) for account_id, delta in transaction_effects(transaction)),
    )


def compute_balances(
    accounts: list[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """
    Recompute every balance from scratch.

    Starts each account at opening_balance and folds in every
    transaction. Does not mutate the accounts.
    """
    balances = {account.id: account.opening_balance for account in accounts}
    for transaction in transactions:
        for account_id, delta in transaction_effects(transaction):
            if account_id in balances:
                balances[account_id] += delta
    return balances


# =============================================================================
# ENGINE
# =============================================================================

class BalanceEngine:
    """
    Persists balance changes for transaction adds, edits and deletes.

    Only the transaction repository should call this. Storage errors
    propagate; nothing here retries.
    """

    def __init__(
        self,
        account_repository: "AccountRepository",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._accounts = account_repository
        self._audit_logger = audit_logger or account_repository.store.audit_logger

    async def update_balances_for_transaction(
        self,
        new_transaction: Optional[Transaction],
        old_transaction: Optional[Transaction] = None,
    ) -> None:
        """
        Revert old_transaction (if given), then apply new_transaction (if given).

        add:    (new, None)
        update: (new, old)
        delete: (None, old)

        Accounts are loaded once and saved once, under the accounts lock.

        Raises:
            StorageError: If loading or saving accounts fails
        """
        if new_transaction is None and old_transaction is None:
            return

        async with self._accounts.locked():
            accounts = await self._accounts.get_all_strict()
            touched: list[str] = []
            if old_transaction is not None:
                touched += revert_transaction(accounts, old_transaction)
            if new_transaction is not None:
                touched += apply_transaction(accounts, new_transaction)
            if not touched:
                return
            await self._accounts.save_all(accounts)

        await self._audit_logger.log(
            AuditEventBuilder.balances_updated(
                sorted(set(touched)),
                reverted=old_transaction.id if old_transaction else None,
                applied=new_transaction.id if new_transaction else None,
            )
        )

    async def recalculate_all_balances(
        self,
        transactions: list[Transaction],
    ) -> dict[str, Decimal]:
        """
        Overwrite every current_balance with a fresh fold of the history.

        Idempotent. Transactions naming unknown accounts are ignored the
        same way the incremental path ignores them.

        Returns:
            The recomputed balance for every account

        Raises:
            StorageError: If loading or saving accounts fails
        """
        async with self._accounts.locked():
            accounts = await self._accounts.get_all_strict()
            balances = compute_balances(accounts, transactions)

            changed = {}
            for account in accounts:
                if account.current_balance != balances[account.id]:
                    changed[account.id] = f"{account.current_balance} -> {balances[account.id]}"
                    account.current_balance = balances[account.id]

            await self._accounts.save_all(accounts)

        await self._audit_logger.log(
            AuditEventBuilder.balances_recalculated(len(accounts), len(transactions), changed)
        )
        return balances
