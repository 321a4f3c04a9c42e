"""
Auth router.

Endpoints for signup, login/logout with a signed session cookie, and a
"who am I" check used by clients before showing the dashboard.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from pydantic import BaseModel

from config import Settings
from lexicards.api.dependencies import get_app_settings, get_practice_registry, get_user_store, optional_user
from lexicards.api.practice_registry import PracticeRegistry
from lexicards.auth.tokens import create_session_token
from lexicards.storage import InvalidCredentialsError, InvalidUsernameError, StorageError, UserExistsError, UserStore

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class Credentials(BaseModel):
    """Username/password pair for signup and login."""

    username: str = ""
    password: str = ""


# ========================================
# Endpoints
# ========================================


@router.post("/signup", summary="Create an account")
def signup(
    credentials: Credentials,
    users: UserStore = Depends(get_user_store),
) -> Dict[str, str]:
    if not credentials.username or not credentials.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    try:
        users.create(credentials.username, credentials.password)
    except (UserExistsError, InvalidUsernameError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        logger.exception("Signup failed")
        raise HTTPException(status_code=500, detail="Failed to create user")

    return {"message": "User created successfully"}


@router.post("/login", summary="Log in and set the session cookie")
def login(
    credentials: Credentials,
    response: Response,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    try:
        username = users.authenticate(credentials.username, credentials.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    except StorageError:
        logger.exception("Login failed")
        raise HTTPException(status_code=500, detail="Login failed")

    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(username, settings.session_secret),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/",
    )
    logger.info(f"User {username} logged in")
    return {"message": "Logged in successfully", "user": {"username": username}}


@router.post("/logout", summary="Clear the session cookie")
def logout(
    response: Response,
    username: str | None = Depends(optional_user),
    settings: Settings = Depends(get_app_settings),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, str]:
    if username:
        registry.close(username)
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Logged out"}


@router.get("/me", summary="Current session")
def me(username: str | None = Depends(optional_user)) -> Dict[str, Any]:
    if username is None:
        return {"authenticated": False}
    return {"authenticated": True, "user": {"username": username}}
