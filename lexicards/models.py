"""
Card models shared by storage, the API and the practice engine.

Field aliases keep the on-disk JSON compatible with existing card files:

    {"id": "...", "german": "Apfel", "arabic": "تفاحة", "hint": "",
     "category": "A1-1", "tags": ["food"], "hasAudio": false,
     "type": "word", "createdAt": "2025-01-01T12:00:00+00:00"}
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY = "General"
DEFAULT_CARD_TYPE = "word"


def _clean_tags(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(tag).strip() for tag in value if str(tag).strip()]


class Card(BaseModel):
    """One vocabulary card as stored for a user."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str
    term: str = Field(alias="german")
    meaning: str = Field(alias="arabic")
    hint: str = ""
    category: str = DEFAULT_CATEGORY
    tags: List[str] = Field(default_factory=list)
    has_audio: bool = Field(default=False, alias="hasAudio")
    type: str = DEFAULT_CARD_TYPE
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> List[str]:
        return _clean_tags(value)

    @field_validator("hint", mode="before")
    @classmethod
    def _none_hint(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def is_practicable(self) -> bool:
        """Both sides are filled in, so the card can be quizzed."""
        return bool(self.term.strip()) and bool(self.meaning.strip())

    def to_storage(self) -> dict:
        """Dump with the on-disk field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CardCreate(BaseModel):
    """Payload for creating a card."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    term: str = Field(alias="german", min_length=1)
    meaning: str = Field(alias="arabic", min_length=1)
    hint: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    has_audio: bool = Field(default=False, alias="hasAudio")
    type: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> List[str]:
        return _clean_tags(value)

    @field_validator("term", "meaning")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class CardUpdate(CardCreate):
    """
    Payload for updating a card.

    ``has_audio`` and ``type`` keep their stored values when omitted.
    """

    has_audio: Optional[bool] = Field(default=None, alias="hasAudio")
