"""Entity repositories, one per stored collection."""

from pocket_ledger.repositories.accounts import AccountRepository
from pocket_ledger.repositories.base import CollectionRepository
from pocket_ledger.repositories.budgets import BudgetRepository, GoalRepository
from pocket_ledger.repositories.categories import CategoryRepository
from pocket_ledger.repositories.settings import SettingsRepository
from pocket_ledger.repositories.transactions import TransactionRepository

__all__ = [
    "AccountRepository",
    "BudgetRepository",
    "CategoryRepository",
    "CollectionRepository",
    "GoalRepository",
    "SettingsRepository",
    "TransactionRepository",
]
