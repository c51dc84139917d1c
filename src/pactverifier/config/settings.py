"""
Application settings using Pydantic.

Provides environment-based configuration loading with PACTVERIFIER_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_DIR = "logs"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PACTVERIFIER_",
        extra="ignore",
    )

    # Run logs and file reports
    log_dir: str = DEFAULT_LOG_DIR

    # Publishing
    publish_verification_results: bool = False
    provider_version: str | None = None

    # HTTP client settings
    http_timeout: float = 30.0

    # Broker credentials (sent as a bearer token when no explicit options are given)
    broker_token: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
