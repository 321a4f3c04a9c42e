"""
FastAPI dependencies.

Stores and the practice registry are built once per application in
``create_app`` and kept on ``app.state``; handlers receive them through these
functions so tests can point an app at a temporary data directory.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from config import Settings
from lexicards.api.practice_registry import PracticeRegistry
from lexicards.auth.tokens import verify_session_token
from lexicards.storage import AudioStore, CardStore, UserStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_card_store(request: Request) -> CardStore:
    return request.app.state.card_store


def get_audio_store(request: Request) -> AudioStore:
    return request.app.state.audio_store


def get_practice_registry(request: Request) -> PracticeRegistry:
    return request.app.state.practice_registry


def optional_user(request: Request, settings: Settings = Depends(get_app_settings)) -> str | None:
    """Username from a valid session cookie, or None."""
    token = request.cookies.get(settings.session_cookie_name)
    return verify_session_token(token, settings.session_secret, max_age=settings.session_max_age_seconds)


def current_user(username: str | None = Depends(optional_user)) -> str:
    """Require a logged-in user."""
    if username is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return username
