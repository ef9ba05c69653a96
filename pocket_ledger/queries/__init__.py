"""Ledger statistics package."""

from pocket_ledger.queries.statistics import LedgerStatistics

__all__ = ["LedgerStatistics"]
