"""
Practice mode: typed-answer quizzes over a random sample of the learner's cards.

Provides:
- sampler: Fisher-Yates shuffle and bounded sampling
- evaluator: trim + case-fold answer comparison
- accumulator: at-most-once scoring and the error log
- engine: the setup/active/results state machine
"""

from lexicards.practice.accumulator import accuracy, record
from lexicards.practice.engine import (
    InvalidLimitError,
    NoCardsError,
    PracticeEngine,
    PracticeSnapshot,
    PracticeStateError,
    parse_limit,
)
from lexicards.practice.evaluator import is_correct, normalize_answer
from lexicards.practice.sampler import sample, shuffle
from lexicards.practice.session import ErrorEntry, Feedback, Score, Session, ViewState

__all__ = [
    "PracticeEngine",
    "PracticeSnapshot",
    "PracticeStateError",
    "InvalidLimitError",
    "NoCardsError",
    "parse_limit",
    "sample",
    "shuffle",
    "is_correct",
    "normalize_answer",
    "record",
    "accuracy",
    "Session",
    "Score",
    "ErrorEntry",
    "Feedback",
    "ViewState",
]
