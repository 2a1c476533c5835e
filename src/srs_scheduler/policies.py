"""Selectable scheduling policies.

Each policy owns one calculator and one state shape. ``review`` is the shared
path that turns a calculator result into an updated card with its counters and
timestamps; the formulas of different policies are never mixed.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Union

from srs_scheduler import difficulty, sm2
from srs_scheduler.config import SchedulerSettings
from srs_scheduler.errors import ValidationError
from srs_scheduler.models import (
    Card,
    DifficultySignal,
    QualitySignal,
    resolve_now,
    validate_quality,
)

logger = logging.getLogger(__name__)


class SchedulingPolicy(ABC):
    name: str = ""

    @abstractmethod
    def apply(self, card: Card, correct: bool, quality: Optional[int]) -> Card:
        """Return a copy of card with the policy's scheduling fields updated."""

    def review(
        self,
        card: Card,
        correct: bool,
        quality: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Card:
        """Apply one review event and stamp the result.

        The card passed in is left untouched.
        """
        now = resolve_now(now)
        card.validate_counters()
        if quality is not None:
            validate_quality(quality)
        updated = self.apply(card, correct, quality)
        return replace(
            updated,
            last_review=now,
            next_review=now + timedelta(days=updated.interval),
            review_count=card.review_count + 1,
            correct_count=card.correct_count + (1 if correct else 0),
            incorrect_count=card.incorrect_count + (0 if correct else 1),
            last_performance=quality if quality is not None else card.last_performance,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Sm2Policy(SchedulingPolicy):
    name = "sm2"

    def __init__(self, max_ease_factor: Optional[float] = None):
        self.max_ease_factor = max_ease_factor

    def apply(self, card: Card, correct: bool, quality: Optional[int]) -> Card:
        state = sm2.next_review(
            card.review_state,
            QualitySignal(correct=correct, quality=quality),
            max_ease_factor=self.max_ease_factor,
        )
        return replace(
            card,
            repetitions=state.repetitions,
            ease_factor=state.ease_factor,
            interval=state.interval,
        )

    def __repr__(self) -> str:
        return f"Sm2Policy(max_ease_factor={self.max_ease_factor!r})"


class DifficultyPolicy(SchedulingPolicy):
    name = "difficulty"

    def apply(self, card: Card, correct: bool, quality: Optional[int]) -> Card:
        card.difficulty_state.validate()
        state = difficulty.next_review(
            DifficultySignal(was_correct=correct, current_difficulty=card.difficulty)
        )
        return replace(card, difficulty=state.difficulty, interval=state.interval)


POLICIES = {
    Sm2Policy.name: Sm2Policy,
    DifficultyPolicy.name: DifficultyPolicy,
}


def get_policy(selection: Union[str, SchedulerSettings, None] = None) -> SchedulingPolicy:
    """Build the policy named by a string or by settings (defaults to SM-2)."""
    if isinstance(selection, SchedulerSettings):
        name = selection.policy
        max_ease_factor = selection.max_ease_factor
    else:
        name = selection or Sm2Policy.name
        max_ease_factor = None

    if name not in POLICIES:
        raise ValidationError(
            f"unknown scheduling policy {name!r}, expected one of {sorted(POLICIES)}"
        )
    if name == Sm2Policy.name:
        policy = Sm2Policy(max_ease_factor=max_ease_factor)
    else:
        policy = POLICIES[name]()
    logger.debug("Using scheduling policy %r", policy)
    return policy
