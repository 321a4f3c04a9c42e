"""Typed-answer checking."""

from __future__ import annotations


def normalize_answer(text: str) -> str:
    """Trim surrounding whitespace and fold case."""
    return text.strip().casefold()


def is_correct(user_answer: str, expected: str) -> bool:
    """Exact match after normalization; no fuzzy matching or accent folding."""
    return normalize_answer(user_answer) == normalize_answer(expected)
