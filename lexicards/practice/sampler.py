"""Random, size-bounded selection of cards for a practice run."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly shuffled copy of ``items`` (Fisher-Yates).

    Walks from the last index down to 1 and swaps each slot with a uniformly
    chosen index in ``[0, i]``. The input is never modified.
    """
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def sample(cards: Sequence[T], limit: int, rng: random.Random | None = None) -> list[T]:
    """
    Draw up to ``limit`` cards in random order.

    A limit larger than the deck is clamped to the deck size.
    """
    return shuffle(cards, rng)[: min(limit, len(cards))]
