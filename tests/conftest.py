"""
Shared fixtures.

Every test runs against an in-memory backend and a recording audit
logger, so nothing touches disk unless a test asks for tmp_path.
"""

from typing import Optional

import pytest

from pocket_ledger.audit import AuditLogger
from pocket_ledger.models import AuditEvent, AuditEventType
from pocket_ledger.orchestrator import AppComponents
from pocket_ledger.services.storage import MemoryBackend, PersistentStore, StorageError


class RecordingAuditLogger(AuditLogger):
    """Keeps every event in memory instead of writing it out."""

    def __init__(self):
        super().__init__("pocket_ledger.tests")
        self.events: list[AuditEvent] = []

    async def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def of_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        return [event for event in self.events if event.event_type == event_type]


class FlakyBackend(MemoryBackend):
    """MemoryBackend that fails reads or writes for chosen keys."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()

    async def get_item(self, key: str) -> Optional[str]:
        if key in self.fail_reads:
            raise StorageError(f"read failed for {key}")
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        if key in self.fail_writes:
            raise StorageError(f"write failed for {key}")
        await super().set_item(key, value)


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def backend() -> FlakyBackend:
    return FlakyBackend()


@pytest.fixture
def store(backend, audit_logger) -> PersistentStore:
    return PersistentStore(backend, audit_logger=audit_logger)


@pytest.fixture
def ledger(store, audit_logger) -> AppComponents:
    return AppComponents(store, audit_logger)
