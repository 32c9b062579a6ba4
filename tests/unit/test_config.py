"""
Unit tests for settings.
"""
import pytest
from pydantic import ValidationError

from schemabridge import PrismaConfig, Settings


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        current = Settings()
        assert current.PRISMA_GENERATOR_PROVIDER == "prisma-client-js"
        assert current.PRISMA_DATASOURCE_PROVIDER == "postgresql"
        assert current.PRISMA_DATABASE_URL_ENV == "DATABASE_URL"
        assert current.DOCUMENT_TIMESTAMPS is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SCHEMABRIDGE_PRISMA_DATASOURCE_PROVIDER", "sqlite")
        monkeypatch.setenv("SCHEMABRIDGE_LOG_LEVEL", "debug")
        current = Settings()
        assert current.PRISMA_DATASOURCE_PROVIDER == "sqlite"
        assert current.LOG_LEVEL == "DEBUG"

    def test_unknown_provider_is_rejected(self, monkeypatch):
        monkeypatch.setenv("SCHEMABRIDGE_PRISMA_DATASOURCE_PROVIDER", "oracle")
        with pytest.raises(ValidationError):
            Settings()

    def test_prisma_config_defaults_from_settings(self):
        config = PrismaConfig()
        assert config.datasource_provider == "postgresql"
        assert config.database_url_env == "DATABASE_URL"
