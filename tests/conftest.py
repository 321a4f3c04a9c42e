"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from lexicards.models import Card  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API and CLI against a temp data dir)")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary data directory, with cheap password hashing."""
    return Settings(
        data_dir=tmp_path / "data",
        cli_session_file=tmp_path / "cli" / "session",
        session_secret="test-secret",
        password_hash_iterations=1000,
        log_file=None,
        _env_file=None,
    )


@pytest.fixture
def rng():
    """Seeded random source so shuffles are reproducible."""
    return random.Random(1234)


def make_card(card_id: str, term: str, meaning: str, **extra) -> Card:
    return Card(id=card_id, term=term, meaning=meaning, **extra)


@pytest.fixture
def sample_cards():
    """Five distinct German/Arabic cards."""
    return [
        make_card("c1", "Apfel", "تفاحة", hint="fruit", category="A1-1", tags=["food"]),
        make_card("c2", "Haus", "بيت", category="A1-1"),
        make_card("c3", "Buch", "كتاب", category="A1-2", has_audio=True),
        make_card("c4", "Wasser", "ماء", category="A1-2", tags=["drink"]),
        make_card("c5", "Straße", "شارع", category="A2-1"),
    ]
