"""
Unit tests for score and error-log bookkeeping.

Run: pytest tests/unit/test_accumulator.py -v
"""

import pytest

from lexicards.practice.accumulator import accuracy, record
from lexicards.practice.session import Score, Session


@pytest.fixture
def session(sample_cards):
    return Session(queue=sample_cards[:3])


class TestRecord:
    def test_correct_answer_scores(self, session, sample_cards):
        assert record(session, sample_cards[0], "Apfel", True) is True
        assert (session.score.correct, session.score.total) == (1, 1)
        assert session.error_log == []
        assert session.attempted_current is True

    def test_wrong_answer_logged_with_trimmed_text(self, session, sample_cards):
        record(session, sample_cards[0], " apple ", False)
        assert (session.score.correct, session.score.total) == (0, 1)
        assert len(session.error_log) == 1
        assert session.error_log[0].card == sample_cards[0]
        assert session.error_log[0].user_answer == "apple"

    def test_second_record_same_position_is_noop(self, session, sample_cards):
        record(session, sample_cards[0], "apple", False)
        assert record(session, sample_cards[0], "Apfel", True) is False
        assert (session.score.correct, session.score.total) == (0, 1)
        assert len(session.error_log) == 1


class TestAccuracy:
    @pytest.mark.parametrize(
        "correct, total, expected",
        [
            (2, 3, 67),
            (1, 3, 33),
            (1, 2, 50),
            (1, 8, 13),
            (0, 4, 0),
            (5, 5, 100),
        ],
    )
    def test_rounding(self, correct, total, expected):
        assert accuracy(Score(correct=correct, total=total)) == expected

    def test_undefined_without_attempts(self):
        assert accuracy(Score()) is None
