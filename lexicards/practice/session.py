"""
Practice session state.

A Session is the whole mutable state of one practice run. It is created by
the engine on start and dropped on exit, restart or a new start; nothing else
holds on to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from lexicards.models import Card


class ViewState(str, Enum):
    """Which screen the practice flow is on."""

    SETUP = "setup"
    ACTIVE = "active"
    RESULTS = "results"


class Feedback(str, Enum):
    """Checked sub-state of the current queue position."""

    NONE = "none"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass
class Score:
    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class ErrorEntry:
    """A missed card together with what the learner typed."""

    card: Card
    user_answer: str


@dataclass
class Session:
    """One bounded practice run over a sampled queue."""

    queue: list[Card]
    position: int = 0
    score: Score = field(default_factory=Score)
    error_log: list[ErrorEntry] = field(default_factory=list)
    attempted_current: bool = False
    feedback: Feedback = Feedback.NONE
    last_answer: str = ""
    show_hint: bool = False
    skipped: int = 0

    @property
    def current_card(self) -> Card | None:
        if 0 <= self.position < len(self.queue):
            return self.queue[self.position]
        return None

    @property
    def is_last(self) -> bool:
        return self.position + 1 >= len(self.queue)

    def clear_feedback(self) -> None:
        self.feedback = Feedback.NONE
        self.last_answer = ""
        self.show_hint = False
