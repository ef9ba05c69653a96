"""
Storage Services Package

Provides the abstract key-value interface, concrete backends, and the
JSON persistent store that the repositories build on.
"""

from pocket_ledger.services.storage.interface import (
    CorruptedDataError,
    KeyValueBackend,
    NotFoundError,
    StorageError,
)
from pocket_ledger.services.storage.backends import (
    JsonFileBackend,
    MemoryBackend,
)
from pocket_ledger.services.storage.store import (
    PersistentStore,
    StorageKeys,
)

__all__ = [
    # Interface
    "KeyValueBackend",
    # Exceptions
    "CorruptedDataError",
    "NotFoundError",
    "StorageError",
    # Backends
    "JsonFileBackend",
    "MemoryBackend",
    # Store
    "PersistentStore",
    "StorageKeys",
]
