"""
FastAPI application for lexicards.

Provides REST API for:
- Signup, login and cookie sessions
- Card CRUD with search, category filter and paging
- Pronunciation clip upload/playback
- Server-side practice sessions
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import Settings, get_settings
from lexicards import __version__
from lexicards.api.practice_registry import PracticeRegistry
from lexicards.api.routers import audio_router, auth_router, cards_router, practice_router
from lexicards.logging_setup import configure_logging
from lexicards.storage import AudioStore, CardStore, UserStore


def _check_storage_health(settings: Settings) -> tuple[str, str | None]:
    """
    Check that the data directory is usable.

    Returns:
        Tuple of (status, error_message). Status is "ok" or "error".
    """
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        probe = settings.data_dir / ".health"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
        return "ok", None
    except OSError as e:
        return "error", str(e)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with stores rooted at ``settings.data_dir``."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        configure_logging(settings)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Starting lexicards API (data dir: {settings.data_dir})")

        yield

        logger.info("Shutting down lexicards API...")

    app = FastAPI(
        title="Lexicards",
        description="Personal vocabulary flashcards with typed-answer practice.",
        version=__version__,
        lifespan=lifespan,
    )

    audio_store = AudioStore(settings.audio_dir, settings.audio_extension)
    card_store = CardStore(settings.cards_dir, audio_store)
    app.state.settings = settings
    app.state.user_store = UserStore(settings.users_file, settings.password_hash_iterations)
    app.state.card_store = card_store
    app.state.audio_store = audio_store
    app.state.practice_registry = PracticeRegistry(card_store)

    # CORS middleware for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(cards_router.router, prefix="/api/cards", tags=["Cards"])
    app.include_router(audio_router.router, prefix="/api/audio", tags=["Audio"])
    app.include_router(practice_router.router, prefix="/api/practice", tags=["Practice"])

    # ========================================
    # Health & Status Endpoints
    # ========================================

    @app.get("/", tags=["Health"])
    def root() -> dict[str, str]:
        """Root endpoint returning service info."""
        return {
            "service": "lexicards",
            "version": __version__,
            "status": "ok",
        }

    @app.get("/health", tags=["Health"])
    def health_check() -> dict[str, Any]:
        """Health check with an actual write probe of the data directory."""
        storage_status, storage_error = _check_storage_health(settings)
        result: dict[str, Any] = {
            "status": "healthy" if storage_status == "ok" else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "components": {"storage": storage_status},
        }
        if storage_error:
            result["errors"] = {"storage": storage_error}
        return result

    return app


app = create_app()
