"""Small shared helpers."""

from pocket_ledger.utils.ids import generate_id

__all__ = ["generate_id"]
