"""Lexicards: personal vocabulary flashcards with a typed-answer practice mode."""

__version__ = "1.0.0"
