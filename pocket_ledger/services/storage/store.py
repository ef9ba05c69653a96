"""
Persistent Store

JSON-encodes whole collections into a KeyValueBackend under six fixed
keys, and bootstraps default data on first run.

DESIGN DECISION: Every write replaces a whole collection. There are no
partial updates. Writers that load, mutate and save a collection hold
the per-key lock from lock() for the whole cycle, so two overlapping
edits of the same collection queue instead of overwriting each other.
"""

import asyncio
import json
from typing import Any, Optional

from pocket_ledger.audit import AuditLogger
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import (
    Account,
    AppData,
    Budget,
    Category,
    Goal,
    Transaction,
    UserSettings,
)
from pocket_ledger.services.storage.defaults import (
    default_accounts,
    default_categories,
    default_settings,
)
from pocket_ledger.services.storage.interface import (
    CorruptedDataError,
    KeyValueBackend,
    StorageError,
)


class StorageKeys:
    """Fixed storage keys, one per collection."""
    SETTINGS = "settings"
    ACCOUNTS = "accounts"
    CATEGORIES = "categories"
    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    GOALS = "goals"

    ALL = (SETTINGS, ACCOUNTS, CATEGORIES, TRANSACTIONS, BUDGETS, GOALS)


class PersistentStore:
    """
    Generic async JSON persistence over a key-value backend.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        audit_logger: Optional[AuditLogger] = None,
        default_currency: str = "USD",
    ):
        self._backend = backend
        self._audit_logger = audit_logger or AuditLogger()
        self._default_currency = default_currency
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def lock(self, key: str) -> asyncio.Lock:
        """
        Lock serializing load-mutate-save cycles on one key.

        Not reentrant: code holding lock(K) must not call anything
        that acquires lock(K) again.
        """
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def save(self, key: str, data: Any) -> None:
        """
        Serialize data to JSON and write it under key.

        Raises:
            StorageError: If data is not JSON-serializable or the write fails
        """
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize data for key {key}: {e}") from e

        try:
            await self._backend.set_item(key, payload)
        except StorageError as e:
            await self._audit_logger.log(
                AuditEventBuilder.storage_error(key, "save", str(e))
            )
            raise

    async def load(self, key: str) -> Optional[Any]:
        """
        Read and deserialize the value under key.

        Returns:
            The decoded value, or None if the key is absent

        Raises:
            CorruptedDataError: If the stored value is not valid JSON
            StorageError: If the read fails
        """
        raw = await self._backend.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptedDataError(f"Corrupted JSON data under key {key}: {e}") from e

    async def is_first_run(self) -> bool:
        """True if no settings record exists yet. Assumes first run on read errors."""
        try:
            return await self.load(StorageKeys.SETTINGS) is None
        except StorageError:
            return True

    async def initialize_default_data(self) -> list[str]:
        """
        Seed every absent key with its default value.

        Existing keys are never overwritten, so this is safe to call on
        every start.

        Returns:
            The keys that were seeded by this call
        """
        currency = self._default_currency
        seeds = {
            StorageKeys.SETTINGS: lambda: default_settings(currency).to_storage(),
            StorageKeys.ACCOUNTS: lambda: [a.to_storage() for a in default_accounts(currency)],
            StorageKeys.CATEGORIES: lambda: [c.to_storage() for c in default_categories()],
            StorageKeys.TRANSACTIONS: list,
            StorageKeys.BUDGETS: list,
            StorageKeys.GOALS: list,
        }

        seeded = []
        for key, build in seeds.items():
            async with self.lock(key):
                if await self._backend.get_item(key) is not None:
                    continue
                await self.save(key, build())
                seeded.append(key)

        await self._audit_logger.log(AuditEventBuilder.data_initialized(seeded))
        return seeded

    async def reset_all_data(self) -> None:
        """
        Delete every known key. Does not re-seed; call
        initialize_default_data() afterwards if defaults are wanted.
        """
        await self._backend.multi_remove(StorageKeys.ALL)
        await self._audit_logger.log(AuditEventBuilder.data_reset(list(StorageKeys.ALL)))

    async def export_app_data(self) -> AppData:
        """Snapshot every collection into one AppData aggregate."""
        settings = await self.load(StorageKeys.SETTINGS)
        return AppData(
            settings=(
                UserSettings.model_validate(settings)
                if settings is not None
                else default_settings(self._default_currency)
            ),
            accounts=[Account.model_validate(r) for r in await self.load(StorageKeys.ACCOUNTS) or []],
            categories=[Category.model_validate(r) for r in await self.load(StorageKeys.CATEGORIES) or []],
            transactions=[Transaction.model_validate(r) for r in await self.load(StorageKeys.TRANSACTIONS) or []],
            budgets=[Budget.model_validate(r) for r in await self.load(StorageKeys.BUDGETS) or []],
            goals=[Goal.model_validate(r) for r in await self.load(StorageKeys.GOALS) or []],
        )
