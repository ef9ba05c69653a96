"""
Base Collection Repository

Every entity collection is stored as one JSON array under a fixed key.
A repository loads the whole array, changes it in memory, and writes the
whole array back.

DESIGN DECISION: Reads used for display swallow errors and return an
empty list, so a broken collection never takes the app down. Reads that
feed a write propagate errors instead, so a failed read can never be
followed by a write that wipes the collection.
"""

import asyncio
from typing import ClassVar, Generic, Optional, TypeVar

from pydantic import ValidationError

from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import LedgerModel
from pocket_ledger.services.storage import (
    CorruptedDataError,
    NotFoundError,
    PersistentStore,
    StorageError,
)
from pocket_ledger.utils.ids import generate_id


T = TypeVar("T", bound=LedgerModel)


class CollectionRepository(Generic[T]):
    """
    CRUD over one stored collection.

    Subclasses set model, key and entity_name, and choose between soft
    delete (is_archived = True) and hard delete (removal).
    """

    model: ClassVar[type[LedgerModel]]
    key: ClassVar[str]
    entity_name: ClassVar[str]
    soft_delete: ClassVar[bool] = False

    def __init__(self, store: PersistentStore):
        self._store = store
        self._audit_logger = store.audit_logger

    @property
    def store(self) -> PersistentStore:
        return self._store

    # Public API -----------------------------------------------------------

    async def get_all(self) -> list[T]:
        """Load the collection; [] if absent or unreadable."""
        try:
            return await self._load()
        except StorageError as e:
            await self._audit_logger.log(
                AuditEventBuilder.storage_error(self.key, "load", str(e))
            )
            return []

    async def get_all_strict(self) -> list[T]:
        """
        Load the collection for a write, propagating read errors.

        Callers doing load-mutate-save must hold locked() around the cycle.
        """
        return await self._load()

    def locked(self) -> asyncio.Lock:
        """The store lock guarding this collection's key."""
        return self._store.lock(self.key)

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        for entity in await self.get_all():
            if entity.id == entity_id:
                return entity
        return None

    async def add(self, entity: T) -> T:
        """
        Append a new entity under a freshly generated id.

        Any id already on the entity is replaced.
        """
        async with self.locked():
            entities = await self.get_all_strict()
            created = entity.model_copy(update={"id": generate_id()})
            entities.append(created)
            await self.save_all(entities)
        return created

    async def update(self, entity: T) -> T:
        """
        Replace the stored entity with the same id.

        Raises:
            NotFoundError: If no entity has that id
        """
        async with self.locked():
            entities = await self.get_all_strict()
            index = self._index_of(entities, entity.id)
            entities[index] = entity
            await self.save_all(entities)
        return entity

    async def delete(self, entity_id: str) -> None:
        """
        Archive (soft delete) or remove (hard delete) an entity.

        Raises:
            NotFoundError: If no entity has that id
        """
        async with self.locked():
            entities = await self.get_all_strict()
            index = self._index_of(entities, entity_id)
            if self.soft_delete:
                deleted = entities[index].model_copy(update={"is_archived": True})
                entities[index] = deleted
            else:
                deleted = entities.pop(index)
            await self.save_all(entities)
        await self._on_deleted(deleted)

    async def save_all(self, entities: list[T]) -> None:
        """Persist the full collection, replacing what is stored."""
        await self._store.save(self.key, [entity.to_storage() for entity in entities])

    # Internal helpers -----------------------------------------------------

    async def _load(self) -> list[T]:
        """
        Load and validate the collection.

        Raises:
            CorruptedDataError: If the payload is not a list of valid records
            StorageError: If the read fails
        """
        records = await self._store.load(self.key)
        if records is None:
            return []
        if not isinstance(records, list):
            raise CorruptedDataError(f"Expected list payload under key {self.key}")
        try:
            return [self.model.model_validate(record) for record in records]
        except ValidationError as e:
            raise CorruptedDataError(f"Invalid {self.entity_name} record under key {self.key}: {e}") from e

    def _index_of(self, entities: list[T], entity_id: str) -> int:
        for index, entity in enumerate(entities):
            if entity.id == entity_id:
                return index
        raise NotFoundError(f"{self.entity_name} with ID {entity_id} not found")

    async def _on_deleted(self, entity: T) -> None:
        """Hook run after a delete has been persisted."""
        pass
