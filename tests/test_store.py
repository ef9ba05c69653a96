"""
Tests for the persistent store and its backends.
"""

import json

import pytest

from pocket_ledger.models import AccountType, AuditEventType, CategoryType
from pocket_ledger.services.storage import (
    CorruptedDataError,
    JsonFileBackend,
    MemoryBackend,
    PersistentStore,
    StorageError,
    StorageKeys,
)


class TestPersistentStore:
    """Tests for JSON save/load over a backend."""

    @pytest.mark.asyncio
    async def test_save_then_load(self, store):
        """A saved value loads back unchanged."""
        await store.save("accounts", [{"id": "1", "name": "Cash"}])
        assert await store.load("accounts") == [{"id": "1", "name": "Cash"}]

    @pytest.mark.asyncio
    async def test_save_overwrites(self, store):
        """A second save replaces the first."""
        await store.save("goals", [1, 2, 3])
        await store.save("goals", [])
        assert await store.load("goals") == []

    @pytest.mark.asyncio
    async def test_load_absent_is_none(self, store):
        """Loading a key that was never written returns None."""
        assert await store.load("budgets") is None

    @pytest.mark.asyncio
    async def test_load_malformed_raises_corrupted(self, store, backend):
        """Invalid JSON raises CorruptedDataError, a StorageError."""
        await backend.set_item("accounts", "[{")
        with pytest.raises(CorruptedDataError):
            await store.load("accounts")

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self, store):
        """Values json cannot encode raise StorageError before any write."""
        with pytest.raises(StorageError, match="Cannot serialize"):
            await store.save("accounts", {"bad": object()})

    @pytest.mark.asyncio
    async def test_write_failure_is_logged_and_raised(self, store, backend, audit_logger):
        """A backend write failure propagates and is audited."""
        backend.fail_writes.add("accounts")
        with pytest.raises(StorageError):
            await store.save("accounts", [])
        assert audit_logger.of_type(AuditEventType.STORAGE_ERROR)[0].entity_id == "accounts"

    def test_lock_is_per_key(self, store):
        """The same key always yields the same lock; different keys do not share one."""
        assert store.lock("accounts") is store.lock("accounts")
        assert store.lock("accounts") is not store.lock("transactions")


class TestBootstrap:
    """Tests for first-run detection, default seeding and reset."""

    @pytest.mark.asyncio
    async def test_first_run_until_initialized(self, store):
        """is_first_run flips once defaults are written."""
        assert await store.is_first_run() is True
        await store.initialize_default_data()
        assert await store.is_first_run() is False

    @pytest.mark.asyncio
    async def test_first_run_on_read_error(self, store, backend):
        """A failing settings read is treated as a first run."""
        backend.fail_reads.add(StorageKeys.SETTINGS)
        assert await store.is_first_run() is True

    @pytest.mark.asyncio
    async def test_default_seed(self, store):
        """Defaults include two accounts, nine categories and empty lists."""
        seeded = await store.initialize_default_data()

        assert sorted(seeded) == sorted(StorageKeys.ALL)

        accounts = await store.load(StorageKeys.ACCOUNTS)
        assert [a["name"] for a in accounts] == ["Cash", "Bank Account"]
        assert [a["type"] for a in accounts] == [AccountType.CASH.value, AccountType.BANK.value]

        categories = await store.load(StorageKeys.CATEGORIES)
        income = [c["name"] for c in categories if c["type"] == CategoryType.INCOME.value]
        assert income == ["Salary", "Gifts", "Interest"]
        assert len(categories) == 9

        for key in (StorageKeys.TRANSACTIONS, StorageKeys.BUDGETS, StorageKeys.GOALS):
            assert await store.load(key) == []

    @pytest.mark.asyncio
    async def test_bootstrap_is_idempotent(self, store):
        """A second bootstrap writes nothing and keeps the seeded ids."""
        await store.initialize_default_data()
        first = await store.load(StorageKeys.ACCOUNTS)

        assert await store.initialize_default_data() == []
        assert await store.load(StorageKeys.ACCOUNTS) == first

    @pytest.mark.asyncio
    async def test_bootstrap_keeps_existing_keys(self, store):
        """Only absent keys are seeded."""
        await store.save(StorageKeys.ACCOUNTS, [])

        seeded = await store.initialize_default_data()

        assert StorageKeys.ACCOUNTS not in seeded
        assert await store.load(StorageKeys.ACCOUNTS) == []

    @pytest.mark.asyncio
    async def test_reset_removes_everything(self, store, backend, audit_logger):
        """reset_all_data deletes every key and does not re-seed."""
        await store.initialize_default_data()
        await store.reset_all_data()

        assert backend.keys() == []
        assert await store.is_first_run() is True
        assert audit_logger.of_type(AuditEventType.DATA_RESET)

    @pytest.mark.asyncio
    async def test_export_snapshot(self, store):
        """export_app_data collects every collection."""
        await store.initialize_default_data()

        snapshot = await store.export_app_data()

        assert len(snapshot.accounts) == 2
        assert len(snapshot.categories) == 9
        assert snapshot.transactions == []
        assert snapshot.version == "1"


class TestJsonFileBackend:
    """Tests for the one-file-per-key backend."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, tmp_path):
        """Values are written to <key>.json and read back."""
        backend = JsonFileBackend(tmp_path / "ledger")
        await backend.set_item("accounts", "[]")

        assert (tmp_path / "ledger" / "accounts.json").read_text(encoding="utf-8") == "[]"
        assert await backend.get_item("accounts") == "[]"

    @pytest.mark.asyncio
    async def test_absent_key(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        assert await backend.get_item("goals") is None

    @pytest.mark.asyncio
    async def test_no_temp_file_left(self, tmp_path):
        """Atomic writes leave only the final file behind."""
        backend = JsonFileBackend(tmp_path)
        await backend.set_item("budgets", "[1]")
        await backend.set_item("budgets", "[2]")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["budgets.json"]
        assert await backend.get_item("budgets") == "[2]"

    @pytest.mark.asyncio
    async def test_remove_and_multi_remove(self, tmp_path):
        """Removing absent keys is not an error."""
        backend = JsonFileBackend(tmp_path)
        await backend.set_item("a", "1")
        await backend.set_item("b", "2")

        await backend.remove_item("a")
        await backend.multi_remove(["b", "never-written"])

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_rejects_path_like_keys(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        with pytest.raises(StorageError, match="Invalid storage key"):
            await backend.set_item("../escape", "x")

    @pytest.mark.asyncio
    async def test_store_survives_restart(self, tmp_path):
        """A new store over the same directory sees the seeded data."""
        first = PersistentStore(JsonFileBackend(tmp_path))
        await first.initialize_default_data()

        second = PersistentStore(JsonFileBackend(tmp_path))
        assert await second.is_first_run() is False
        assert len(await second.load(StorageKeys.CATEGORIES)) == 9

    @pytest.mark.asyncio
    async def test_memory_backend_initial_contents(self):
        """MemoryBackend can be pre-loaded, e.g. with a legacy record."""
        legacy = [{"id": "1", "name": "Old", "type": "cash", "initialBalance": 42}]
        store = PersistentStore(MemoryBackend({"accounts": json.dumps(legacy)}))
        assert (await store.load("accounts"))[0]["initialBalance"] == 42
