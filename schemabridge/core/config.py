# core/config.py
"""
Configuration settings for schemabridge.

Every setting can be overridden by an environment variable carrying the
``SCHEMABRIDGE_`` prefix, or from a ``.env`` file.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PRISMA_PROVIDERS = {"postgresql", "mysql", "sqlite", "sqlserver", "mongodb", "cockroachdb"}


class Settings(BaseSettings):
    """Defaults used by the generators when no explicit config is passed."""

    # --- Prisma output ---
    PRISMA_GENERATOR_PROVIDER: str = "prisma-client-js"
    PRISMA_DATASOURCE_PROVIDER: str = "postgresql"
    PRISMA_DATABASE_URL_ENV: str = "DATABASE_URL"  # name of the env var read by Prisma

    # --- Document models ---
    DOCUMENT_TIMESTAMPS: bool = True

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SCHEMABRIDGE_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("PRISMA_DATASOURCE_PROVIDER")
    @classmethod
    def validate_datasource_provider(cls, v: str) -> str:
        if v not in PRISMA_PROVIDERS:
            raise ValueError(
                f"Unknown Prisma datasource provider '{v}', expected one of {sorted(PRISMA_PROVIDERS)}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get settings with caching."""
    return Settings()


# Global settings instance
settings = get_settings()

__all__ = ["Settings", "get_settings", "settings", "PRISMA_PROVIDERS"]
