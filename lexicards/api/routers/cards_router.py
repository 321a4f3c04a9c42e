"""
Cards router.

CRUD for the logged-in user's cards plus the dashboard listing (search,
category filter, paging).
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, ValidationError

from config import Settings
from lexicards.api.dependencies import current_user, get_app_settings, get_card_store
from lexicards.models import Card, CardCreate, CardUpdate
from lexicards.study import ALL_CATEGORIES, filter_cards, paginate
from lexicards.storage import CardNotFoundError, CardStore, StorageError

router = APIRouter()


class CardPage(BaseModel):
    """One page of the dashboard listing."""

    cards: List[Dict[str, Any]]
    page: int
    pages: int
    total: int
    categories: List[str]


def _parse(model: type[CardCreate], payload: Dict[str, Any], detail: str) -> CardCreate:
    try:
        return model.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail=detail)


@router.get("", response_model=CardPage, summary="List cards")
def list_cards(
    search: str | None = None,
    category: str = ALL_CATEGORIES,
    page: int = Query(1, ge=1),
    username: str = Depends(current_user),
    store: CardStore = Depends(get_card_store),
    settings: Settings = Depends(get_app_settings),
) -> CardPage:
    """Newest first. ``search`` matches term, meaning or tags; ``category=all`` disables the filter."""
    try:
        cards = store.list_cards(username)
        categories = store.categories(username)
    except StorageError:
        logger.exception(f"Could not read cards for {username}")
        raise HTTPException(status_code=500, detail="Failed to load cards")

    result = paginate(filter_cards(cards, search, category), page, settings.cards_per_page)
    return CardPage(
        cards=[card.to_storage() for card in result.items],
        page=result.page,
        pages=result.pages,
        total=result.total,
        categories=categories,
    )


@router.get("/categories", summary="Categories in use plus presets")
def list_categories(
    username: str = Depends(current_user),
    store: CardStore = Depends(get_card_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, List[str]]:
    try:
        used = store.categories(username)
    except StorageError:
        logger.exception(f"Could not read categories for {username}")
        raise HTTPException(status_code=500, detail="Failed to load categories")
    return {"used": used, "presets": list(settings.preset_categories)}


@router.post("", summary="Add a card")
def add_card(
    payload: Dict[str, Any],
    username: str = Depends(current_user),
    store: CardStore = Depends(get_card_store),
) -> Dict[str, Any]:
    data = _parse(CardCreate, payload, "German and Arabic text required")
    try:
        card = store.add_card(username, data)
    except StorageError:
        logger.exception("Add card failed")
        raise HTTPException(status_code=500, detail="Failed to add card")
    return card.to_storage()


@router.put("/{card_id}", summary="Update a card")
def update_card(
    card_id: str,
    payload: Dict[str, Any],
    username: str = Depends(current_user),
    store: CardStore = Depends(get_card_store),
) -> Dict[str, Any]:
    data = _parse(CardUpdate, payload, "Missing required fields")
    try:
        card: Card = store.update_card(username, card_id, data)
    except CardNotFoundError:
        raise HTTPException(status_code=404, detail="Card not found")
    except StorageError:
        logger.exception("Update card failed")
        raise HTTPException(status_code=500, detail="Update failed")
    return card.to_storage()


@router.delete("/{card_id}", summary="Delete a card and its audio")
def delete_card(
    card_id: str,
    username: str = Depends(current_user),
    store: CardStore = Depends(get_card_store),
) -> Dict[str, str]:
    try:
        removed = store.delete_card(username, card_id)
    except StorageError:
        logger.exception("Delete card failed")
        raise HTTPException(status_code=500, detail="Delete failed")
    if not removed:
        raise HTTPException(status_code=404, detail="Card not found")
    return {"message": "Deleted"}
