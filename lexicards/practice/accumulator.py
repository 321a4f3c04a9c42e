"""
Score and error-log bookkeeping.

``record`` is the only place a Session's score changes. It scores each queue
position at most once; later checks of the same card (after a retype) only
change the feedback shown, not the score.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from lexicards.models import Card
from lexicards.practice.session import ErrorEntry, Score, Session


def record(session: Session, card: Card, user_answer: str, correct: bool) -> bool:
    """
    Score the current position if it has not been scored yet.

    Returns:
        True if the score changed, False if the position was already attempted
    """
    if session.attempted_current:
        return False

    session.score.total += 1
    if correct:
        session.score.correct += 1
    else:
        session.error_log.append(ErrorEntry(card=card, user_answer=user_answer.strip()))
    session.attempted_current = True
    return True


def accuracy(score: Score) -> int | None:
    """Whole-number percentage of attempted cards answered correctly, rounded half up."""
    if score.total == 0:
        return None
    ratio = Decimal(100 * score.correct) / Decimal(score.total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))
