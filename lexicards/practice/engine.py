"""
Practice Engine: the setup -> active -> results state machine.

The learner sees a card's meaning and types the term. Flow:

    setup --start(limit)--> active
    active --submit/retype/hint--> active
    active --advance--> active            (more cards left)
    active --advance--> results           (last card)
    active --exit--> setup
    results --restart--> setup
    results --again--> active             (new run, same size)

Cards are fetched once when the engine is built; edits made elsewhere are
picked up by the next engine, not by a running session.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from loguru import logger

from lexicards.models import Card
from lexicards.practice import accumulator, evaluator, sampler
from lexicards.practice.session import ErrorEntry, Feedback, Session, ViewState
from lexicards.storage.errors import StorageError


class PracticeStateError(Exception):
    """Raised when an action is not valid in the current view state."""
    pass


class InvalidLimitError(ValueError):
    """Raised when a session size is not a positive whole number."""
    pass


class NoCardsError(Exception):
    """Raised when a session is started with no practicable cards."""
    pass


def parse_limit(raw: Any) -> int:
    """
    Parse a session size typed by the learner.

    Raises:
        InvalidLimitError: Value is empty, non-numeric or not positive
    """
    if isinstance(raw, bool):
        raise InvalidLimitError(f"Invalid session size: {raw!r}")
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            raise InvalidLimitError(f"Invalid session size: {raw!r}") from None
    if value <= 0:
        raise InvalidLimitError(f"Session size must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class PracticeSnapshot:
    """Read-only view of the engine for rendering."""

    state: ViewState
    available_cards: int
    queue_length: int = 0
    position: int = 0
    current_card: Optional[Card] = None
    feedback: Feedback = Feedback.NONE
    last_answer: str = ""
    show_hint: bool = False
    correct: int = 0
    total: int = 0
    skipped: int = 0
    accuracy: Optional[int] = None
    errors: tuple[ErrorEntry, ...] = field(default_factory=tuple)

    @property
    def can_play_audio(self) -> bool:
        return self.current_card is not None and self.current_card.has_audio

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; the answer side of the current card stays hidden until checked."""
        card = None
        if self.current_card is not None:
            card = {
                "id": self.current_card.id,
                "meaning": self.current_card.meaning,
                "hint": self.current_card.hint if self.show_hint else None,
                "has_hint": bool(self.current_card.hint),
                "has_audio": self.current_card.has_audio,
                "category": self.current_card.category,
            }
            if self.feedback is not Feedback.NONE:
                card["term"] = self.current_card.term
        return {
            "state": self.state.value,
            "available_cards": self.available_cards,
            "queue_length": self.queue_length,
            "position": self.position,
            "current_card": card,
            "feedback": self.feedback.value,
            "last_answer": self.last_answer,
            "score": {"correct": self.correct, "total": self.total},
            "skipped": self.skipped,
            "accuracy": self.accuracy,
            "errors": [
                {
                    "card": entry.card.model_dump(mode="json"),
                    "user_answer": entry.user_answer,
                }
                for entry in self.errors
            ],
        }


class PracticeEngine:
    """
    Owns one learner's practice flow.

    Args:
        fetch_cards: Returns every card visible to the learner
        rng: Random source for sampling (seed it in tests)
        play_audio: Called with a card id to play its clip; fire and forget
    """

    def __init__(
        self,
        fetch_cards: Callable[[], Iterable[Card]],
        rng: random.Random | None = None,
        play_audio: Callable[[str], None] | None = None,
    ):
        self._rng = rng or random.Random()
        self._play_audio = play_audio
        self._state = ViewState.SETUP
        self._session: Session | None = None
        self._last_limit: int | None = None
        self._cards = self._load(fetch_cards)

    @staticmethod
    def _load(fetch_cards: Callable[[], Iterable[Card]]) -> list[Card]:
        try:
            cards = list(fetch_cards())
        except (StorageError, OSError) as e:
            logger.warning(f"Could not load cards for practice: {e}")
            return []
        practicable = [c for c in cards if c.is_practicable]
        if len(practicable) != len(cards):
            logger.debug(f"Skipping {len(cards) - len(practicable)} cards with an empty side")
        return practicable

    # ========================================
    # Read side
    # ========================================

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    @property
    def is_empty(self) -> bool:
        """No practicable cards; show the empty state instead of setup."""
        return not self._cards

    @property
    def session(self) -> Session | None:
        return self._session

    def snapshot(self) -> PracticeSnapshot:
        session = self._session
        if session is None:
            return PracticeSnapshot(state=self._state, available_cards=len(self._cards))
        return PracticeSnapshot(
            state=self._state,
            available_cards=len(self._cards),
            queue_length=len(session.queue),
            position=session.position,
            current_card=session.current_card if self._state is ViewState.ACTIVE else None,
            feedback=session.feedback,
            last_answer=session.last_answer,
            show_hint=session.show_hint,
            correct=session.score.correct,
            total=session.score.total,
            skipped=session.skipped,
            accuracy=accumulator.accuracy(session.score),
            errors=tuple(session.error_log),
        )

    # ========================================
    # Transitions
    # ========================================

    def _require(self, *states: ViewState) -> None:
        if self._state not in states:
            allowed = ", ".join(s.value for s in states)
            raise PracticeStateError(f"Action requires state {allowed}, current state is {self._state.value}")

    def _active_session(self) -> Session:
        self._require(ViewState.ACTIVE)
        assert self._session is not None
        return self._session

    def start(self, limit: Any) -> PracticeSnapshot:
        """
        Begin a run of ``limit`` cards (clamped to the deck size).

        Raises:
            InvalidLimitError: Limit is not a positive whole number
            NoCardsError: There is nothing to practice
        """
        self._require(ViewState.SETUP)
        size = parse_limit(limit)
        if not self._cards:
            raise NoCardsError("No cards available for practice")

        self._session = Session(queue=sampler.sample(self._cards, size, self._rng))
        self._last_limit = size
        self._state = ViewState.ACTIVE
        logger.info(f"Practice started: {len(self._session.queue)} of {len(self._cards)} cards")
        return self.snapshot()

    def start_all(self) -> PracticeSnapshot:
        return self.start(max(len(self._cards), 1))

    def submit(self, answer: str) -> Feedback:
        """
        Check an answer for the current card.

        Only the first check at a queue position counts toward the score.
        While feedback is showing, further submissions are ignored.
        """
        session = self._active_session()
        if session.feedback is not Feedback.NONE:
            return session.feedback

        card = session.current_card
        assert card is not None
        correct = evaluator.is_correct(answer, card.term)
        session.feedback = Feedback.CORRECT if correct else Feedback.INCORRECT
        session.last_answer = answer.strip()
        accumulator.record(session, card, answer, correct)
        return session.feedback

    def retype(self) -> None:
        """Try the same card again without changing the score."""
        self._active_session().clear_feedback()

    def reveal_hint(self) -> str:
        session = self._active_session()
        session.show_hint = True
        card = session.current_card
        return card.hint if card else ""

    def advance(self) -> ViewState:
        """Move to the next card, or to results after the last one."""
        session = self._active_session()
        if not session.attempted_current:
            session.skipped += 1
            logger.debug(f"Card at position {session.position} skipped without a check")

        if session.is_last:
            self._state = ViewState.RESULTS
            logger.info(
                f"Practice finished: {session.score.correct}/{session.score.total} correct, "
                f"{len(session.error_log)} errors, {session.skipped} skipped"
            )
        else:
            session.position += 1
            session.attempted_current = False
            session.clear_feedback()
        return self._state

    def exit(self) -> None:
        """Abandon the active run and go back to setup."""
        self._require(ViewState.ACTIVE)
        self._reset()

    def restart(self) -> None:
        """Leave the results screen for setup."""
        self._require(ViewState.RESULTS)
        self._reset()

    def again(self, limit: Any = None) -> PracticeSnapshot:
        """From results, start a fresh run (same size as the last one unless given)."""
        self._require(ViewState.RESULTS)
        self._reset()
        return self.start(limit if limit is not None else self._last_limit)

    def _reset(self) -> None:
        self._session = None
        self._state = ViewState.SETUP

    # ========================================
    # Audio
    # ========================================

    def play_audio(self, card: Card | None = None) -> bool:
        """
        Ask the player to play a card's clip (the current card by default).

        Returns:
            False when the card has no clip or no player is configured
        """
        if card is None and self._session is not None and self._state is ViewState.ACTIVE:
            card = self._session.current_card
        if card is None or not card.has_audio or self._play_audio is None:
            return False
        self._play_audio(card.id)
        return True
