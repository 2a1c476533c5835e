"""Additive difficulty scheduling model.

A lighter alternative to SM-2 for callers that only track one difficulty
scalar per card. Correct answers raise the difficulty by 0.1, misses lower it
by 0.2, and the interval is six days scaled by the result.
"""
from datetime import datetime, timedelta

from srs_scheduler.errors import ValidationError
from srs_scheduler.models import MAX_DIFFICULTY, MIN_DIFFICULTY, DifficultySignal, DifficultyState
from srs_scheduler.sm2 import round_half_up

CORRECT_STEP = 0.1
INCORRECT_STEP = 0.2
BASE_INTERVAL_DAYS = 6


def next_review(signal: DifficultySignal) -> DifficultyState:
    current = signal.current_difficulty
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        raise ValidationError(f"current_difficulty must be a number, got {current!r}")
    if not MIN_DIFFICULTY <= current <= MAX_DIFFICULTY:
        raise ValidationError(
            f"current_difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {current}"
        )

    if signal.was_correct:
        new_difficulty = current + CORRECT_STEP
    else:
        new_difficulty = current - INCORRECT_STEP
    new_difficulty = round(max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, new_difficulty)), 2)

    return DifficultyState(
        difficulty=new_difficulty,
        interval=round_half_up(BASE_INTERVAL_DAYS * new_difficulty),
    )


def next_review_date(last_review: datetime, state: DifficultyState) -> datetime:
    return last_review + timedelta(days=state.interval)
