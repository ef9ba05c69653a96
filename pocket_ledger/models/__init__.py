"""
Data Models Package

This package contains all Pydantic models used in Pocket Ledger.
Everything written to or read from the key-value store conforms to these schemas.
"""

from pocket_ledger.models.ledger import (
    Account,
    AccountType,
    AppData,
    Budget,
    BudgetPeriod,
    Category,
    CategoryType,
    Goal,
    LedgerModel,
    Theme,
    Transaction,
    TransactionType,
    UserSettings,
)
from pocket_ledger.models.reports import (
    BudgetStatus,
    CategoryTotal,
    NetWorthSummary,
    PeriodTotals,
)
from pocket_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountType",
    "AppData",
    "Budget",
    "BudgetPeriod",
    "Category",
    "CategoryType",
    "Goal",
    "LedgerModel",
    "Theme",
    "Transaction",
    "TransactionType",
    "UserSettings",
    # Report models
    "BudgetStatus",
    "CategoryTotal",
    "NetWorthSummary",
    "PeriodTotals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
