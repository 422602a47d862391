"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields in .env file
        case_sensitive=False,  # Allow both UPPERCASE and lowercase
    )

    # Claude API (Optional - without it every generative step uses its fallback)
    ANTHROPIC_API_KEY: Optional[str] = None
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Analysis settings
    LIVE_PROBE_DELAY_SECONDS: float = 0.5
    CACHE_FRESHNESS_HOURS: int = 24

    # "database" (SQLAlchemy) or "memory" (process-local, lost on restart)
    STORAGE_BACKEND: str = "database"

    # Timeouts
    PAGE_FETCH_TIMEOUT: float = 15.0


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
