"""
Configuration settings for the lexicards service and CLI.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a ``LEXICARDS_`` prefixed environment variable.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEXICARDS_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path("data"),
        description="Root directory for users.json, per-user card files and audio clips",
    )

    # ========================================
    # Authentication
    # ========================================
    session_secret: str = Field(
        default="change-me-in-production",
        description="Secret used to sign session cookies",
    )
    session_cookie_name: str = Field(
        default="session",
        description="Name of the session cookie",
    )
    session_max_age_seconds: int = Field(
        default=60 * 60 * 24 * 7,  # 1 week
        description="Lifetime of the session cookie",
    )
    cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS",
    )
    password_hash_iterations: int = Field(
        default=260_000,
        ge=1,
        description="PBKDF2 iterations for new password hashes",
    )

    # ========================================
    # Cards & Practice
    # ========================================
    default_session_limit: int = Field(
        default=10,
        ge=1,
        description="Number of cards in a practice run when no limit is given",
    )
    session_limit_presets: list[int] = Field(
        default=[10, 20, 50],
        description="Quick-start sizes offered on the practice setup screen",
    )
    cards_per_page: int = Field(
        default=50,
        ge=1,
        description="Cards per page when browsing",
    )
    preset_categories: list[str] = Field(
        default=[
            "A1-1", "A1-2", "A2-1", "A2-2",
            "B1-1", "B1-2", "B2-1", "B2-2",
            "C1", "C2", "General",
        ],
        description="Suggested CEFR-style categories for new cards",
    )

    # ========================================
    # Audio
    # ========================================
    audio_extension: str = Field(
        default="webm",
        description="File extension used for stored pronunciation clips",
    )
    audio_content_type: str = Field(
        default="audio/webm",
        description="Content-Type served for pronunciation clips",
    )
    audio_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Largest accepted audio upload",
    )
    audio_player: str = Field(
        default="ffplay -nodisp -autoexit -loglevel quiet",
        description="Command the CLI runs (with the clip path appended) to play audio",
    )

    # ========================================
    # CLI
    # ========================================
    cli_session_file: Path = Field(
        default=Path.home() / ".lexicards" / "session",
        description="Where the CLI keeps the signed session token after login",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/lexicards.log",
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    # ========================================
    # Derived paths
    # ========================================
    @property
    def users_file(self) -> Path:
        return self.data_dir / "users.json"

    @property
    def cards_dir(self) -> Path:
        return self.data_dir / "cards"

    @property
    def audio_dir(self) -> Path:
        return self.data_dir / "audio"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
