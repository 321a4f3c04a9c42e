"""API routers for lexicards."""

from lexicards.api.routers import (
    audio_router,
    auth_router,
    cards_router,
    practice_router,
)

__all__ = [
    "auth_router",
    "cards_router",
    "audio_router",
    "practice_router",
]
