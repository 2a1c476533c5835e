import json
from datetime import datetime, timedelta, timezone

import pytest

from srs_scheduler.models import Card


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SRS_* variables from the host environment out of the tests."""
    for name in ("SRS_POLICY", "SRS_MAX_EASE_FACTOR", "SRS_SESSION_LIMIT",
                 "SRS_FORECAST_DAYS", "SRS_DECK_PATH", "SRS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_card(now):
    """Build a card due ``due_in_days`` from now (negative means overdue)."""
    def _make(card_id="c1", due_in_days=None, **fields):
        if due_in_days is not None:
            fields["next_review"] = now + timedelta(days=due_in_days)
        return Card(id=card_id, **fields)
    return _make


@pytest.fixture
def deck_file(tmp_path, now):
    deck = {
        "cards": [
            {"id": "overdue", "nextReview": (now - timedelta(days=2)).isoformat(),
             "studyStats": {"repetitions": 2, "easeFactor": 2.3, "interval": 6,
                            "timesReviewed": 4, "correctCount": 3, "incorrectCount": 1}},
            {"id": "new"},
            {"id": "later", "next_review": (now + timedelta(days=30)).isoformat(),
             "review_count": 1, "correct_count": 1},
        ],
        "reviews": [
            {"performance": 4, "timeSpent": 12},
            {"performance": 2, "timeSpent": 20},
            {"correct": True, "timeSpent": 8},
        ],
    }
    path = tmp_path / "deck.json"
    path.write_text(json.dumps(deck))
    return path
