"""
Transaction Repository

The only caller of the balance engine. Every add, update and delete
first persists the transaction list, then asks the engine to move the
affected account balances.

DESIGN DECISION: A transaction collection that cannot be decoded is
reset to an empty list instead of failing every later read. The
corruption and the reset are both logged at ERROR. Plain I/O errors are
not treated as corruption and never trigger a reset.

There is no rollback: if the account save fails after the transaction
save succeeded, balances drift until recalculate_balances() is run.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Transaction
from pocket_ledger.repositories.base import CollectionRepository
from pocket_ledger.services.balance import BalanceEngine
from pocket_ledger.services.storage import (
    CorruptedDataError,
    PersistentStore,
    StorageError,
    StorageKeys,
)
from pocket_ledger.utils.ids import generate_id
from pocket_ledger.validation import TransactionValidator


class TransactionRepository(CollectionRepository[Transaction]):
    model = Transaction
    key = StorageKeys.TRANSACTIONS
    entity_name = "Transaction"

    def __init__(
        self,
        store: PersistentStore,
        balance_engine: BalanceEngine,
        validator: Optional[TransactionValidator] = None,
    ):
        """
        Args:
            store: Persistent store holding the transaction list
            balance_engine: Engine notified after every persisted change
            validator: Reference checks run before add and update.
                       If None, references are not checked.
        """
        super().__init__(store)
        self._engine = balance_engine
        self._validator = validator

    # Reads ----------------------------------------------------------------

    async def get_all(self) -> list[Transaction]:
        """Load all transactions; corrupted data is reset to []."""
        try:
            return await self._load()
        except CorruptedDataError as e:
            await self._reset_corrupted(e, raise_on_failure=False)
            return []
        except StorageError as e:
            await self._audit_logger.log(
                AuditEventBuilder.storage_error(self.key, "load", str(e))
            )
            return []

    async def get_all_strict(self) -> list[Transaction]:
        """
        Load for a write. Corrupted data is reset to [], I/O errors propagate.
        """
        try:
            return await self._load()
        except CorruptedDataError as e:
            await self._reset_corrupted(e, raise_on_failure=True)
            return []

    async def get_for_account(self, account_id: str) -> list[Transaction]:
        """Transactions touching an account, transfers on either side included."""
        return [tx for tx in await self.get_all() if tx.touches(account_id)]

    async def get_in_range(self, start: date, end: date) -> list[Transaction]:
        """Transactions dated within [start, end], inclusive."""
        return [tx for tx in await self.get_all() if start <= tx.date.date() <= end]

    # Writes ---------------------------------------------------------------

    async def add(self, entity: Transaction) -> Transaction:
        """
        Persist a new transaction and apply its effect to balances.

        Raises:
            TransactionValidationError: If a referenced account or category is unusable
            StorageError: If either save fails
        """
        if self._validator is not None:
            await self._validator.validate(entity)

        async with self.locked():
            transactions = await self.get_all_strict()
            created = entity.model_copy(update={"id": generate_id()})
            transactions.append(created)
            await self.save_all(transactions)
            await self._engine.update_balances_for_transaction(created)

        await self._audit_logger.log(
            AuditEventBuilder.transaction_added(created.id, created.type.value, str(created.amount))
        )
        return created

    async def update(self, entity: Transaction) -> Transaction:
        """
        Replace a transaction, reverting the old effect and applying the new.

        Raises:
            NotFoundError: If no transaction has that id
            TransactionValidationError: If a referenced account or category is unusable
            StorageError: If either save fails
        """
        if self._validator is not None:
            await self._validator.validate(entity)

        async with self.locked():
            transactions = await self.get_all_strict()
            index = self._index_of(transactions, entity.id)
            previous = transactions[index]
            transactions[index] = entity
            await self.save_all(transactions)
            await self._engine.update_balances_for_transaction(entity, previous)

        await self._audit_logger.log(
            AuditEventBuilder.transaction_updated(entity.id, str(previous.amount), str(entity.amount))
        )
        return entity

    async def delete(self, entity_id: str) -> None:
        """
        Remove a transaction and revert its effect on balances.

        Raises:
            NotFoundError: If no transaction has that id
            StorageError: If either save fails
        """
        async with self.locked():
            transactions = await self.get_all_strict()
            index = self._index_of(transactions, entity_id)
            removed = transactions.pop(index)
            await self.save_all(transactions)
            await self._engine.update_balances_for_transaction(None, removed)

        await self._audit_logger.log(
            AuditEventBuilder.transaction_deleted(removed.id, removed.type.value, str(removed.amount))
        )

    async def recalculate_balances(self) -> dict[str, Decimal]:
        """
        Rebuild every account balance from the full transaction history.

        Holds the transaction lock so no write lands mid-rebuild.
        """
        async with self.locked():
            transactions = await self.get_all_strict()
            return await self._engine.recalculate_all_balances(transactions)

    # Internal helpers -----------------------------------------------------

    async def _reset_corrupted(self, error: CorruptedDataError, raise_on_failure: bool) -> None:
        try:
            await self.save_all([])
        except StorageError as reset_error:
            await self._audit_logger.log(
                AuditEventBuilder.transactions_corrupted(str(error), reset_ok=False)
            )
            if raise_on_failure:
                raise
            await self._audit_logger.log(
                AuditEventBuilder.storage_error(self.key, "reset", str(reset_error))
            )
            return

        await self._audit_logger.log(
            AuditEventBuilder.transactions_corrupted(str(error), reset_ok=True)
        )
