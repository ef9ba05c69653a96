"""
Application Orchestrator

Wires the store, repositories, balance engine and derived views into
one bundle for a caller (UI, CLI, tests).

DESIGN DECISION: Callers go through the repositories.
- Transactions: TransactionRepository, which drives the balance engine
- Everything else: its own collection repository
- Summaries: read-only helpers on AppComponents that load then fold

Nothing outside TransactionRepository calls the balance engine.
"""

from datetime import date
from pathlib import Path
from typing import Optional

from pocket_ledger.audit import AuditLogger, configure_logging
from pocket_ledger.config import Settings, get_settings
from pocket_ledger.models.reports import BudgetStatus, NetWorthSummary
from pocket_ledger.queries import LedgerStatistics
from pocket_ledger.repositories import (
    AccountRepository,
    BudgetRepository,
    CategoryRepository,
    GoalRepository,
    SettingsRepository,
    TransactionRepository,
)
from pocket_ledger.services.balance import BalanceEngine
from pocket_ledger.services.budgets import BudgetCalculator
from pocket_ledger.services.storage import (
    JsonFileBackend,
    KeyValueBackend,
    MemoryBackend,
    PersistentStore,
)
from pocket_ledger.validation import TransactionValidator


class AppComponents:
    """
    Everything a caller needs, built once at startup.

    Flow:
    1. create_app_components() builds the bundle
    2. await startup() seeds defaults on first run
    3. Callers use the repositories and the summary helpers
    """

    def __init__(
        self,
        store: PersistentStore,
        audit_logger: AuditLogger,
        default_currency: str = "USD",
        validate_references: bool = True,
    ):
        self.store = store
        self.audit_logger = audit_logger

        self.accounts = AccountRepository(store)
        self.categories = CategoryRepository(store)
        self.budgets = BudgetRepository(store)
        self.goals = GoalRepository(store)
        self.settings = SettingsRepository(store, default_currency)

        self.balance_engine = BalanceEngine(self.accounts, audit_logger)
        self.validator = (
            TransactionValidator(self.accounts, self.categories)
            if validate_references
            else None
        )
        self.transactions = TransactionRepository(store, self.balance_engine, self.validator)

        self.budget_calculator = BudgetCalculator()
        self.statistics = LedgerStatistics()

    async def startup(self) -> list[str]:
        """
        Seed default data for any absent key. Safe on every start.

        Returns:
            Keys seeded by this call
        """
        return await self.store.initialize_default_data()

    async def net_worth(self) -> NetWorthSummary:
        return self.statistics.net_worth(await self.accounts.get_all())

    async def budget_statuses(self, today: Optional[date] = None) -> list[BudgetStatus]:
        """Status of every budget whose period covers today."""
        transactions = await self.transactions.get_all()
        current = self.budget_calculator.current_period_budgets(
            await self.budgets.get_all(), today
        )
        return [self.budget_calculator.summarize(budget, transactions) for budget in current]


def _build_backend(settings: Settings, data_dir: Optional[Path]) -> KeyValueBackend:
    if settings.storage.backend == "memory":
        return MemoryBackend()
    return JsonFileBackend(data_dir or settings.storage.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueBackend] = None,
    data_dir: Optional[Path] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from. Defaults to get_settings().
        backend: Explicit key-value backend. Overrides the configured one;
                 tests pass a MemoryBackend here.
        data_dir: Directory for the JSON file backend. Overrides settings.

    Returns:
        AppComponents ready for startup()
    """
    settings = settings or get_settings()
    configure_logging(settings.app.effective_log_level)

    audit_logger = AuditLogger()
    store = PersistentStore(
        backend or _build_backend(settings, data_dir),
        audit_logger=audit_logger,
        default_currency=settings.app.default_currency,
    )

    return AppComponents(
        store,
        audit_logger,
        default_currency=settings.app.default_currency,
        validate_references=settings.app.validate_references,
    )
