"""
Abstract Key-Value Storage Interface

DESIGN DECISION: We define an abstract interface for the raw key-value
operations the ledger needs. This allows us to:
1. Keep ledger data in JSON files on disk
2. Use in-memory storage for testing
3. Swap in another device store later without touching repositories

The interface mirrors a mobile async key-value store: string keys,
string values, nothing else. JSON encoding happens one layer up in
PersistentStore.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class KeyValueBackend(ABC):
    """
    Abstract interface for raw key-value storage.

    Any backend (memory, files, a device store) must implement these methods.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Write a raw value under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    async def multi_remove(self, keys: Iterable[str]) -> None:
        """Remove several keys."""
        for key in keys:
            await self.remove_item(key)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptedDataError(StorageError):
    """Stored value exists but cannot be decoded."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
