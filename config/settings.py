"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values should be stored in .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Enrichment pipeline settings
    enrichment_stale_days: int = 30  # <= 0 keeps cached entries until cleared
    enrichment_call_timeout_seconds: float = 15.0
    enrichment_health_timeout_seconds: float = 5.0
    enrichment_batch_concurrency: int = 5
    enrichment_attempt_log_size: int = 500

    # Cache settings
    enrichment_cache_backend: str = "memory"  # "memory" or "redis"
    enrichment_cache_prefix: str = "enrichment"

    # Redis settings
    redis_url: Optional[str] = "redis://localhost:6379/0"

    # HTTP provider settings
    http_timeout_seconds: float = 30.0
    http_user_agent: str = "leadenrich/0.1"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False


# Singleton instance
settings = Settings()
