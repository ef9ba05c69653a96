"""Settings repository: a single record rather than a collection."""

from typing import Optional

from pydantic import ValidationError

from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import UserSettings
from pocket_ledger.services.storage import PersistentStore, StorageError, StorageKeys
from pocket_ledger.services.storage.defaults import default_settings


class SettingsRepository:
    """Reads fall back to defaults; writes propagate errors."""

    def __init__(self, store: PersistentStore, default_currency: str = "USD"):
        self._store = store
        self._default_currency = default_currency

    async def get(self) -> UserSettings:
        try:
            stored: Optional[dict] = await self._store.load(StorageKeys.SETTINGS)
            if stored is None:
                return default_settings(self._default_currency)
            return UserSettings.model_validate(stored)
        except (StorageError, ValidationError) as e:
            await self._store.audit_logger.log(
                AuditEventBuilder.storage_error(StorageKeys.SETTINGS, "load", str(e))
            )
            return default_settings(self._default_currency)

    async def save(self, settings: UserSettings) -> None:
        async with self._store.lock(StorageKeys.SETTINGS):
            await self._store.save(StorageKeys.SETTINGS, settings.to_storage())
