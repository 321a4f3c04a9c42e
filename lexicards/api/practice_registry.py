"""In-memory practice engines, one per logged-in user, owned by the API application."""

from __future__ import annotations

import random
import threading
from typing import Callable

from loguru import logger

from lexicards.practice import PracticeEngine
from lexicards.storage import CardStore


class PracticeRegistry:
    def __init__(self, card_store: CardStore, rng_factory: Callable[[], random.Random] = random.Random):
        self.card_store = card_store
        self.rng_factory = rng_factory
        self._engines: dict[str, PracticeEngine] = {}
        self._lock = threading.Lock()

    def build(self, username: str) -> PracticeEngine:
        """A fresh engine over a new snapshot of the user's cards, not yet registered."""
        return PracticeEngine(
            lambda: self.card_store.list_cards(username),
            rng=self.rng_factory(),
        )

    def put(self, username: str, engine: PracticeEngine) -> None:
        """Register an engine, replacing any old one."""
        with self._lock:
            self._engines[username] = engine
        logger.debug(f"Opened practice engine for {username} ({len(engine.cards)} cards)")

    def open(self, username: str) -> PracticeEngine:
        engine = self.build(username)
        self.put(username, engine)
        return engine

    def get(self, username: str) -> PracticeEngine | None:
        with self._lock:
            return self._engines.get(username)

    def close(self, username: str) -> None:
        with self._lock:
            self._engines.pop(username, None)
