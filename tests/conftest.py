"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from studytrack.config import Settings  # noqa: E402
from studytrack.core.models import Concept, Difficulty, ReviewSession  # noqa: E402
from studytrack.delivery.state_store import (  # noqa: E402
    ConceptRepository,
    ConceptStore,
    MemoryStorage,
)

TODAY = date(2024, 3, 13)  # a Wednesday


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (whole tracker)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


def make_concept(
    concept_id: str = "c1",
    retention: int = 0,
    subject: str = "Physics",
    reviews: tuple[ReviewSession, ...] = (),
    next_review: date = TODAY,
    **overrides,
) -> Concept:
    """Concept factory with sensible defaults."""
    fields = {
        "id": concept_id,
        "title": f"Concept {concept_id}",
        "subject": subject,
        "description": f"Description of {concept_id}",
        "difficulty": Difficulty.MEDIUM,
        "retention_score": retention,
        "next_review_date": next_review,
        "reviews": reviews,
    }
    fields.update(overrides)
    return Concept(**fields)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def settings(tmp_path):
    """Settings isolated to a temp data directory with no API key."""
    return Settings(data_dir=tmp_path, gemini_api_key=None, study_streak=0)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def empty_store(memory_storage):
    """Store that starts with an explicitly empty collection."""
    memory_storage.set("concepts", "[]")
    return ConceptStore(ConceptRepository(memory_storage))


@pytest.fixture
def sample_concept():
    """Provide a sample concept for testing."""
    return make_concept(
        "photo",
        retention=62,
        subject="Biology",
        reviews=(
            ReviewSession("r2", date(2024, 3, 1), 80, 15),
            ReviewSession("r3", date(2024, 3, 8), 45, 20),
        ),
        last_reviewed=date(2024, 3, 8),
        next_review=date(2024, 3, 10),
    )


@pytest.fixture
def concept_factory():
    """Return the make_concept factory."""
    return make_concept
