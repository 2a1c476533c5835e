# tests/test_policies.py
from datetime import timedelta

import pytest

from srs_scheduler.config import SchedulerSettings
from srs_scheduler.errors import StateInconsistencyError, ValidationError
from srs_scheduler.models import Card
from srs_scheduler.policies import DifficultyPolicy, Sm2Policy, get_policy


def test_sm2_review_new_card(now):
    card = Card.new("c1", now - timedelta(days=1))
    updated = Sm2Policy().review(card, correct=True, quality=5, now=now)
    assert updated.repetitions == 1
    assert updated.interval == 1
    assert updated.last_review == now
    assert updated.next_review == now + timedelta(days=1)
    assert updated.review_count == 1
    assert (updated.correct_count, updated.incorrect_count) == (1, 0)
    assert updated.last_performance == 5


def test_review_leaves_input_card_untouched(now):
    card = Card(id="c1")
    Sm2Policy().review(card, correct=True, quality=4, now=now)
    assert card == Card(id="c1")


def test_sm2_review_lapse_counts_incorrect(now):
    card = Card(id="c1", repetitions=5, ease_factor=2.0, interval=20,
                review_count=9, correct_count=8, incorrect_count=1)
    updated = Sm2Policy().review(card, correct=False, quality=1, now=now)
    assert (updated.repetitions, updated.ease_factor, updated.interval) == (0, 1.8, 1)
    assert updated.review_count == 10
    assert (updated.correct_count, updated.incorrect_count) == (8, 2)
    assert updated.next_review == now + timedelta(days=1)


def test_next_review_always_follows_interval(now):
    policy = Sm2Policy()
    card = Card(id="c1")
    for quality in (5, 4, 4, 3, 5):
        card = policy.review(card, correct=True, quality=quality, now=now)
        assert card.next_review == card.last_review + timedelta(days=card.interval)


def test_sm2_requires_quality_when_correct(now):
    with pytest.raises(ValidationError):
        Sm2Policy().review(Card(id="c1"), correct=True, now=now)


def test_sm2_max_ease_factor(now):
    card = Card(id="c1", repetitions=2, interval=6)
    updated = Sm2Policy(max_ease_factor=2.5).review(card, correct=True, quality=5, now=now)
    assert updated.ease_factor == 2.5


def test_sm2_rejects_corrupt_card(now):
    with pytest.raises(StateInconsistencyError):
        Sm2Policy().review(Card(id="c1", ease_factor=1.1), correct=True, quality=4, now=now)


def test_negative_counter_rejected(now):
    with pytest.raises(StateInconsistencyError):
        Sm2Policy().review(Card(id="c1", review_count=-2), correct=True, quality=4, now=now)


def test_difficulty_review(now):
    card = Card(id="c1", difficulty=1.0, repetitions=3, ease_factor=2.1, interval=6)
    updated = DifficultyPolicy().review(card, correct=True, now=now)
    assert updated.difficulty == 1.1
    assert updated.interval == 7  # round(6.6)
    assert updated.next_review == now + timedelta(days=7)
    # SM-2 fields belong to the other policy
    assert (updated.repetitions, updated.ease_factor) == (3, 2.1)


def test_difficulty_review_keeps_last_performance_without_quality(now):
    card = Card(id="c1", last_performance=2)
    updated = DifficultyPolicy().review(card, correct=False, now=now)
    assert updated.last_performance == 2
    assert updated.incorrect_count == 1


def test_difficulty_review_rejects_corrupt_card(now):
    with pytest.raises(StateInconsistencyError):
        DifficultyPolicy().review(Card(id="c1", difficulty=4.0), correct=True, now=now)


def test_review_rejects_out_of_range_quality_for_any_policy(now):
    with pytest.raises(ValidationError):
        DifficultyPolicy().review(Card(id="c1"), correct=True, quality=8, now=now)


def test_get_policy_by_name():
    assert isinstance(get_policy(), Sm2Policy)
    assert isinstance(get_policy("sm2"), Sm2Policy)
    assert isinstance(get_policy("difficulty"), DifficultyPolicy)


def test_get_policy_from_settings():
    policy = get_policy(SchedulerSettings(policy="sm2", max_ease_factor=2.5))
    assert isinstance(policy, Sm2Policy)
    assert policy.max_ease_factor == 2.5
    assert isinstance(get_policy(SchedulerSettings(policy="difficulty")), DifficultyPolicy)


def test_get_policy_unknown():
    with pytest.raises(ValidationError):
        get_policy("leitner")
