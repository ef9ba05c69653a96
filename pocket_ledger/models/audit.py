"""
Audit Models for Pocket Ledger

Every mutation of stored data is described by an audit event.
This provides:
1. Traceability of balance changes back to the transaction that caused them
2. Debugging information when balances drift
3. A record of destructive actions (archive, reset, corruption recovery)

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Balances
    BALANCES_UPDATED = "balances_updated"
    BALANCES_RECALCULATED = "balances_recalculated"

    # Soft deletes
    ACCOUNT_ARCHIVED = "account_archived"
    CATEGORY_ARCHIVED = "category_archived"

    # Store lifecycle
    DATA_INITIALIZED = "data_initialized"
    DATA_RESET = "data_reset"
    TRANSACTIONS_CORRUPTED = "transactions_corrupted"

    # Failures
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    entity_id is the ledger id of the record the event is about
    (a transaction, account or storage key).
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g. 'transaction', 'account', 'storage')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(tx_id, "expense", "12.50")
        event = AuditEventBuilder.balances_updated(["a1", "a2"])
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        old_amount: str,
        new_amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {old_amount} -> {new_amount}",
            details={
                "old_amount": old_amount,
                "new_amount": new_amount,
            },
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction deleted: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def balances_updated(
        account_ids: list[str],
        reverted: Optional[str] = None,
        applied: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCES_UPDATED,
            severity=AuditSeverity.DEBUG,
            entity_type="account",
            description=f"Balances updated for {len(account_ids)} accounts",
            details={
                "account_ids": account_ids,
                "reverted_transaction": reverted,
                "applied_transaction": applied,
            },
        )

    @staticmethod
    def balances_recalculated(
        account_count: int,
        transaction_count: int,
        changed: dict[str, str],
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if changed else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.BALANCES_RECALCULATED,
            severity=severity,
            entity_type="account",
            description=(
                f"Recalculated {account_count} accounts from "
                f"{transaction_count} transactions, {len(changed)} corrected"
            ),
            details={
                "corrected": changed,
            },
        )

    @staticmethod
    def account_archived(account_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_ARCHIVED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account archived: {name}",
        )

    @staticmethod
    def category_archived(category_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ARCHIVED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category archived: {name}",
        )

    @staticmethod
    def data_initialized(seeded_keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_INITIALIZED,
            entity_type="storage",
            description=f"Data initialization completed, seeded {len(seeded_keys)} keys",
            details={
                "seeded_keys": seeded_keys,
            },
        )

    @staticmethod
    def data_reset(keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description="All app data has been reset",
            details={
                "keys": keys,
            },
        )

    @staticmethod
    def transactions_corrupted(error_message: str, reset_ok: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_CORRUPTED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id="transactions",
            description="Transaction data corrupted, store reset to empty",
            error_message=error_message,
            details={
                "reset_succeeded": reset_ok,
            },
        )

    @staticmethod
    def storage_error(
        key: str,
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Storage error during {operation} of {key}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
