"""
Card browsing helpers for the dashboard: search, category filter and paging.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from lexicards.models import Card

ALL_CATEGORIES = "all"

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    pages: int
    total: int


def filter_cards(
    cards: Sequence[Card],
    search: str | None = None,
    category: str | None = ALL_CATEGORIES,
) -> list[Card]:
    """
    Newest-first view of a user's cards.

    Args:
        cards: Cards in stored (oldest-first) order
        search: Case-insensitive substring of the term, the meaning or any tag
        category: Exact category, or "all"/None for every category
    """
    result = list(reversed(cards))

    if search:
        needle = search.lower()
        result = [
            card
            for card in result
            if needle in card.term.lower()
            or needle in card.meaning.lower()
            or any(needle in tag.lower() for tag in card.tags)
        ]

    if category and category != ALL_CATEGORIES:
        result = [card for card in result if card.category == category]

    return result


def paginate(items: Sequence[T], page: int = 1, per_page: int = 50) -> Page[T]:
    """Slice one page out of ``items``; out-of-range pages are clamped."""
    total = len(items)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(page, 1), pages)
    start = (page - 1) * per_page
    return Page(items=list(items[start:start + per_page]), page=page, pages=pages, total=total)
