"""Validation package."""

from pocket_ledger.validation.validator import (
    TransactionValidationError,
    TransactionValidator,
)

__all__ = [
    "TransactionValidationError",
    "TransactionValidator",
]
