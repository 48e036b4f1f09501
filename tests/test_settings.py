"""
Tests for configuration loading and the ledger factory
"""

from pathlib import Path

import pytest

from wallet.config import LedgerSettings, LoggingSettings, get_settings
from wallet.ledger import create_ledger_service
from wallet.services.storage import InMemoryAuditStorage


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test that an empty environment gives working defaults."""
        for name in ("WALLET_EXPORT_PATH", "WALLET_FILE_ENCODING", "WALLET_AUDIT_ENABLED"):
            monkeypatch.delenv(name, raising=False)

        settings = LedgerSettings()
        assert settings.export_path == Path("accounts.dump")
        assert settings.file_encoding == "utf-8"
        assert settings.audit_enabled is True

    def test_ledger_settings_from_environment(self, monkeypatch, tmp_path):
        """Test that WALLET_ variables are picked up."""
        monkeypatch.setenv("WALLET_EXPORT_PATH", str(tmp_path / "snap.dump"))
        monkeypatch.setenv("WALLET_AUDIT_ENABLED", "false")

        settings = get_settings().ledger
        assert settings.export_path == tmp_path / "snap.dump"
        assert settings.audit_enabled is False

    def test_log_level_is_normalized(self, monkeypatch):
        """Test that log levels are upper-cased."""
        monkeypatch.setenv("WALLET_LOG_LEVEL", "debug")
        assert LoggingSettings().level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        """Test that unknown log levels are rejected."""
        monkeypatch.setenv("WALLET_LOG_LEVEL", "loud")
        with pytest.raises(ValueError, match="Unknown log level"):
            LoggingSettings()

    def test_unknown_log_format(self, monkeypatch):
        """Test that only json and console renderers are accepted."""
        monkeypatch.setenv("WALLET_LOG_FORMAT", "xml")
        with pytest.raises(ValueError):
            LoggingSettings()


class TestCreateLedgerService:
    """Tests for the settings-driven factory."""

    def test_factory_uses_configured_export_path(self, monkeypatch, tmp_path):
        """Test that export without a path writes to WALLET_EXPORT_PATH."""
        path = tmp_path / "snap.dump"
        monkeypatch.setenv("WALLET_EXPORT_PATH", str(path))

        service = create_ledger_service()
        service.add_account_with_balance("+992000000001", 500)
        service.export_to_file()

        assert path.read_text(encoding="utf-8") == "1;+992000000001;500|"

        restored = create_ledger_service()
        restored.import_from_file()
        assert restored.accounts() == service.accounts()

    def test_factory_audit_storage_toggle(self, monkeypatch):
        """Test that the audit trail follows the setting unless overridden."""
        monkeypatch.setenv("WALLET_AUDIT_ENABLED", "false")

        assert create_ledger_service().audit_logger.storage is None
        assert isinstance(
            create_ledger_service(use_audit_storage=True).audit_logger.storage,
            InMemoryAuditStorage,
        )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
