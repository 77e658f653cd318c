"""
MailWarden Application Configuration

Configuration management using pydantic-settings.
All configuration values are loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from mailwarden.utils.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_INTERNAL_DOMAINS,
    DEFAULT_TRUSTED_DOMAINS,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables (e.g. INTERNAL_DOMAINS='["acme.com"]')
    2. .env file (local development)
    3. Default values defined here
    """

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = APP_NAME
    app_version: str = APP_VERSION
    debug: bool = False
    log_level: str = "INFO"

    # =========================================================================
    # Storage
    # =========================================================================
    database_path: str = Field(default="./data/mailwarden.db", description="SQLite database file")

    # =========================================================================
    # Detection context (per-tenant values override these)
    # =========================================================================
    internal_domains: List[str] = Field(default_factory=lambda: list(DEFAULT_INTERNAL_DOMAINS))
    trusted_domains: List[str] = Field(default_factory=lambda: list(DEFAULT_TRUSTED_DOMAINS))

    # =========================================================================
    # Pipeline
    # =========================================================================
    ingestion_lookback_days: int = Field(default=7, ge=1)
    processing_batch_size: int = Field(default=100, ge=1)
    high_risk_summary_limit: int = Field(default=10, ge=1)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @field_validator("internal_domains", "trusted_domains")
    @classmethod
    def _lower_domains(cls, value: List[str]) -> List[str]:
        return [d.strip().lower() for d in value if d.strip()]

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
