"""Configuration and settings for the API.

Loads settings from environment variables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API settings
    api_title: str = "QuizGenius API"
    api_version: str = "0.1.0"
    debug: bool = False

    # CORS settings (for frontend dev server)
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Session cookie; the credential never leaves server memory
    session_cookie_name: str = "quizgenius_session"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Idle sessions are evicted (and their key discarded) after this long
    session_ttl_seconds: int = 60 * 60
    max_sessions: int = 1000

    class Config:
        """Pydantic settings configuration."""

        env_prefix = "QUIZGENIUS_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
