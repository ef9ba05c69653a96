"""Tests for settings, logging and the component factory."""

from pathlib import Path

import pytest

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import (
    AppSettings,
    Settings,
    StorageSettings,
    get_settings,
)
from pocket_ledger.models import AuditEventBuilder
from pocket_ledger.orchestrator import create_app_components
from pocket_ledger.services.storage import JsonFileBackend, MemoryBackend, StorageKeys


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_storage_defaults(self, monkeypatch):
        monkeypatch.delenv("POCKET_LEDGER_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("POCKET_LEDGER_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings()
        assert settings.backend == "json_file"
        assert settings.data_dir == Path("data")

    def test_storage_from_env(self, monkeypatch):
        monkeypatch.setenv("POCKET_LEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("POCKET_LEDGER_STORAGE_DATA_DIR", "~/ledger")
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == Path("~/ledger").expanduser()

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("POCKET_LEDGER_STORAGE_BACKEND", "sqlite")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_app_values_normalized(self, monkeypatch):
        """Log level and currency are upper-cased."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DEFAULT_CURRENCY", "eur")
        settings = AppSettings()
        assert settings.log_level == "DEBUG"
        assert settings.default_currency == "EUR"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            AppSettings(log_level="chatty")

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_debug_mode_forces_debug_logging(self, monkeypatch):
        """debug_mode overrides the configured log level."""
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert AppSettings().effective_log_level == "WARNING"

        monkeypatch.setenv("DEBUG_MODE", "true")
        assert AppSettings().effective_log_level == "DEBUG"


class TestAuditLogger:
    """Tests for the structured audit logger."""

    @pytest.mark.asyncio
    async def test_log_returns_true(self):
        logger = AuditLogger("pocket_ledger.tests.audit")
        assert await logger.log(AuditEventBuilder.data_reset(list(StorageKeys.ALL))) is True


class TestCreateAppComponents:
    """Tests for the factory wiring."""

    @pytest.mark.asyncio
    async def test_explicit_backend_and_startup(self):
        """An explicit backend is used and startup seeds every key."""
        backend = MemoryBackend()
        components = create_app_components(settings=Settings(), backend=backend)

        seeded = await components.startup()

        assert sorted(seeded) == sorted(StorageKeys.ALL)
        assert components.store.backend is backend
        assert len(await components.accounts.get_active()) == 2
        assert (await components.net_worth()).net_worth == 0

    @pytest.mark.asyncio
    async def test_json_file_backend_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POCKET_LEDGER_STORAGE_BACKEND", "json_file")
        components = create_app_components(settings=Settings(), data_dir=tmp_path)

        await components.startup()

        assert isinstance(components.store.backend, JsonFileBackend)
        assert (tmp_path / "settings.json").exists()

    def test_memory_backend_from_settings(self, monkeypatch):
        monkeypatch.setenv("POCKET_LEDGER_STORAGE_BACKEND", "memory")
        components = create_app_components(settings=Settings())
        assert isinstance(components.store.backend, MemoryBackend)

    def test_logging_configured_from_settings(self, monkeypatch):
        """The factory configures logging at the effective level."""
        levels = []
        monkeypatch.setattr("pocket_ledger.orchestrator.configure_logging", levels.append)
        monkeypatch.setenv("LOG_LEVEL", "error")
        monkeypatch.setenv("DEBUG_MODE", "true")

        create_app_components(settings=Settings(), backend=MemoryBackend())

        assert levels == ["DEBUG"]

    def test_validation_switch(self, monkeypatch):
        monkeypatch.setenv("VALIDATE_REFERENCES", "false")
        components = create_app_components(settings=Settings(), backend=MemoryBackend())
        assert components.validator is None
