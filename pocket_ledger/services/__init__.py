"""Services package."""

from pocket_ledger.services.storage import (
    CorruptedDataError,
    JsonFileBackend,
    KeyValueBackend,
    MemoryBackend,
    NotFoundError,
    PersistentStore,
    StorageError,
    StorageKeys,
)
from pocket_ledger.services.balance import (
    BalanceEngine,
    apply_transaction,
    compute_balances,
    revert_transaction,
)
from pocket_ledger.services.budgets import BudgetCalculator

__all__ = [
    # Storage services
    "CorruptedDataError",
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "NotFoundError",
    "PersistentStore",
    "StorageError",
    "StorageKeys",
    # Balance engine
    "BalanceEngine",
    "apply_transaction",
    "compute_balances",
    "revert_transaction",
    # Budgets
    "BudgetCalculator",
]
