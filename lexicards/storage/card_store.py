"""
Per-user card files stored in ``<data_dir>/cards/<username>.json``.

Cards are kept in insertion order; browsing shows them newest first.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from lexicards.models import DEFAULT_CARD_TYPE, DEFAULT_CATEGORY, Card, CardCreate, CardUpdate
from lexicards.storage.audio_store import AudioStore
from lexicards.storage.errors import CardNotFoundError
from lexicards.storage.json_store import JsonFileStore
from lexicards.storage.user_store import validate_username


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CardStore:
    """CRUD over one JSON file per user."""

    def __init__(self, cards_dir: Path, audio_store: Optional[AudioStore] = None):
        self.cards_dir = Path(cards_dir)
        self.audio_store = audio_store

    def _file(self, username: str) -> JsonFileStore:
        validate_username(username)
        return JsonFileStore(self.cards_dir / f"{username}.json", default=[])

    def list_cards(self, username: str) -> list[Card]:
        """All cards for a user in stored order. A missing file means no cards yet."""
        return [Card.model_validate(raw) for raw in self._file(username).read()]

    def get_card(self, username: str, card_id: str) -> Card:
        for card in self.list_cards(username):
            if card.id == card_id:
                return card
        raise CardNotFoundError("Card not found")

    def add_card(self, username: str, payload: CardCreate) -> Card:
        card = Card(
            id=payload.id or str(uuid.uuid4()),
            term=payload.term,
            meaning=payload.meaning,
            hint=payload.hint or "",
            category=payload.category or DEFAULT_CATEGORY,
            tags=payload.tags,
            has_audio=payload.has_audio,
            type=payload.type or DEFAULT_CARD_TYPE,
            created_at=_now(),
        )
        with self._file(username).modify() as cards:
            cards.append(card.to_storage())

        logger.info(f"Added card {card.id} for {username}")
        return card

    def update_card(self, username: str, card_id: str, payload: CardUpdate) -> Card:
        """Replace the editable fields of a card, keeping audio flag and type unless given."""
        with self._file(username).modify() as cards:
            for index, raw in enumerate(cards):
                if raw.get("id") != card_id:
                    continue
                current = Card.model_validate(raw)
                updated = current.model_copy(
                    update={
                        "term": payload.term,
                        "meaning": payload.meaning,
                        "hint": payload.hint or "",
                        "category": payload.category or DEFAULT_CATEGORY,
                        "tags": payload.tags,
                        "has_audio": current.has_audio if payload.has_audio is None else payload.has_audio,
                        "type": payload.type or current.type or DEFAULT_CARD_TYPE,
                        "updated_at": datetime.now(timezone.utc),
                    }
                )
                cards[index] = {**raw, **updated.to_storage()}
                break
            else:
                raise CardNotFoundError("Card not found")

        logger.info(f"Updated card {card_id} for {username}")
        return updated

    def delete_card(self, username: str, card_id: str) -> bool:
        """
        Remove a card and its audio clip.

        Returns:
            True if a card was removed, False if the id was unknown
        """
        with self._file(username).modify() as cards:
            before = len(cards)
            cards[:] = [c for c in cards if c.get("id") != card_id]
            removed = len(cards) != before

        if removed and self.audio_store is not None:
            self.audio_store.delete(username, card_id)
        if removed:
            logger.info(f"Deleted card {card_id} for {username}")
        return removed

    def set_has_audio(self, username: str, card_id: str, has_audio: bool) -> Card:
        with self._file(username).modify() as cards:
            for raw in cards:
                if raw.get("id") == card_id:
                    raw["hasAudio"] = has_audio
                    return Card.model_validate(raw)
            raise CardNotFoundError("Card not found")

    def categories(self, username: str) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for card in self.list_cards(username):
            seen.setdefault(card.category or DEFAULT_CATEGORY, None)
        return list(seen)
