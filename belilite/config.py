"""
BeliLite Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the database layer, and the services.
When:  Loaded once at module import time. Tests build their own Settings
       and pass them to create_app().

Note on XAI_API_KEY:
    The key has no default and is NOT required at startup. The server boots
    and serves notes without it; only POST /api/summarize fails (500) when
    it is missing.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # What: "production" hides error details (upstream messages, DB errors)
    # from API responses. Anything else is treated as a development build.
    environment: str = Field(default="development")

    # ── Database ──────────────────────────────────────────────────────────
    # What: Path of the SQLite file. Created on first run if absent.
    db_path: str = Field(default="notes.db", description="SQLite database file")

    # ── xAI (Grok) ────────────────────────────────────────────────────────
    xai_api_url: str = Field(default="https://api.x.ai/v1/chat/completions")
    xai_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the chat-completion endpoint",
    )
    xai_model: str = Field(default="grok-3")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Static Client ─────────────────────────────────────────────────────
    static_dir: str = Field(default="public")

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DB_PATH and db_path both work
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the configured SQLite file."""
        return f"sqlite+aiosqlite:///{self.db_path}"

    @property
    def summarizer_configured(self) -> bool:
        return bool(self.xai_api_key)


# Singleton instance: used when create_app() is called without overrides
settings = Settings()
