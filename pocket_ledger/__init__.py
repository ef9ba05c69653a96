"""
Pocket Ledger - Source Package

The persistence and balance core of a personal finance tracker:
accounts, categories, transactions, budgets and goals stored in a
local key-value store.

DESIGN PRINCIPLES:
1. Every account balance is the sum of its transaction history
2. Edits revert the old effect before applying the new one
3. Whole collections are read and written, never patched
4. Every mutation is audited
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocket Ledger Team"
