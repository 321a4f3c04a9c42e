"""
Practice router.

Drives a PracticeEngine held server-side for the logged-in user. Every
endpoint returns the engine snapshot so a client can render the setup,
active or results screen from a single response.

The current card's term is only included once an answer has been checked.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from lexicards.api.dependencies import current_user, get_practice_registry
from lexicards.api.practice_registry import PracticeRegistry
from lexicards.practice import InvalidLimitError, NoCardsError, PracticeEngine, PracticeStateError, ViewState

router = APIRouter()


# ========================================
# Request Models
# ========================================


class StartRequest(BaseModel):
    """Session size; null means every card. Strings come from the custom-size box."""

    limit: Optional[Union[int, str]] = None


class AnswerRequest(BaseModel):
    answer: str = ""


# ========================================
# Helpers
# ========================================


def _engine(registry: PracticeRegistry, username: str) -> PracticeEngine:
    engine = registry.get(username)
    if engine is None:
        raise HTTPException(status_code=404, detail="No practice session; start one first")
    return engine


def _conflict(e: PracticeStateError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


# ========================================
# Endpoints
# ========================================


@router.post("", summary="Start a practice run")
def start_practice(
    request: StartRequest,
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    """Reloads the user's cards and samples a new queue; a rejected start leaves any running session alone."""
    engine = registry.build(username)
    try:
        if request.limit is None:
            engine.start_all()
        else:
            engine.start(request.limit)
    except InvalidLimitError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoCardsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    registry.put(username, engine)
    return engine.snapshot().to_dict()


@router.get("", summary="Current practice state")
def get_practice(
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    engine = registry.get(username) or registry.open(username)
    return engine.snapshot().to_dict()


@router.post("/submit", summary="Check an answer")
def submit_answer(
    request: AnswerRequest,
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    engine = _engine(registry, username)
    try:
        engine.submit(request.answer)
    except PracticeStateError as e:
        raise _conflict(e)
    return engine.snapshot().to_dict()


@router.post("/retype", summary="Retry the current card")
def retype(
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    engine = _engine(registry, username)
    try:
        engine.retype()
    except PracticeStateError as e:
        raise _conflict(e)
    return engine.snapshot().to_dict()


@router.post("/hint", summary="Reveal the current card's hint")
def reveal_hint(
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    engine = _engine(registry, username)
    try:
        engine.reveal_hint()
    except PracticeStateError as e:
        raise _conflict(e)
    return engine.snapshot().to_dict()


@router.post("/advance", summary="Next card or finish")
def advance(
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    engine = _engine(registry, username)
    try:
        engine.advance()
    except PracticeStateError as e:
        raise _conflict(e)
    return engine.snapshot().to_dict()


@router.post("/exit", summary="Abandon the run")
def exit_practice(
    username: str = Depends(current_user),
    registry: PracticeRegistry = Depends(get_practice_registry),
) -> Dict[str, Any]:
    """Discards the session from either the active or the results screen."""
    engine = _engine(registry, username)
    if engine.state is ViewState.ACTIVE:
        engine.exit()
    elif engine.state is ViewState.RESULTS:
        engine.restart()
    return engine.snapshot().to_dict()
