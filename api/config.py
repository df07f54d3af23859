"""Configuration and settings for the API.

Loads settings from environment variables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from ccss_import.importer.config import ImportConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API settings
    api_title: str = "CCSS Competency Import API"
    api_version: str = "0.1.0"
    debug: bool = False

    # CORS settings (for the admin frontend dev server)
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Import into an in-memory store instead of the database
    dry_run: bool = False

    class Config:
        """Pydantic settings configuration."""

        env_prefix = "DASHBOARD_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_import_config() -> ImportConfig:
    """Import configuration from CCSS_* environment variables."""
    return ImportConfig.from_env()
