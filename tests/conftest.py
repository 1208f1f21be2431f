from datetime import datetime, timedelta, timezone

import pytest

from mneme.domain.scheduling.models import ReviewEvent
from mneme.infrastructure.adapters.memory import InMemoryReviewHistory, InMemoryScheduleStore

FIXED_NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


def _make_history(*outcomes, start=FIXED_NOW):
    """
    Build a most-recent-first history from (correctness, confidence, minutes) tuples.

    The first tuple is the most recent review; each later one is a day older.
    """
    return [
        ReviewEvent(
            timestamp=start - timedelta(days=i),
            correctness=correctness,
            confidence_after=confidence,
            time_taken_minutes=minutes,
        )
        for i, (correctness, confidence, minutes) in enumerate(outcomes)
    ]


@pytest.fixture
def make_history():
    return _make_history


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def history_repo():
    return InMemoryReviewHistory()


@pytest.fixture
def schedule_store():
    return InMemoryScheduleStore()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and the database
    monkeypatch.setenv("HOME", str(home))
    for var in ("MNEME_BACKEND", "MNEME_DB_PATH", "MNEME_HISTORY_LIMIT", "MNEME_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home
