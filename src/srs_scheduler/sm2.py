"""SM-2 spaced repetition algorithm."""
import math
from typing import Optional

from srs_scheduler.models import (
    MIN_EASE_FACTOR,
    QualitySignal,
    ReviewState,
    validate_quality,
)

LAPSE_EASE_PENALTY = 0.2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def ease_delta(quality: int) -> float:
    return 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)


def next_review(
    state: Optional[ReviewState],
    signal: QualitySignal,
    max_ease_factor: Optional[float] = None,
) -> ReviewState:
    """Calculate next review parameters using SM-2.

    Args:
        state: Current review state, or None for a card never reviewed
        signal: Whether the answer was correct plus its 0-5 quality rating
        max_ease_factor: Optional upper clamp for the ease factor

    Returns:
        The updated ReviewState. Timestamps are left to the caller.
    """
    state = (state or ReviewState()).validate()
    if signal.quality is not None or signal.correct:
        validate_quality(signal.quality)

    if not signal.correct:
        # Lapse: start the streak over and see it again tomorrow
        new_ef = max(MIN_EASE_FACTOR, state.ease_factor - LAPSE_EASE_PENALTY)
        return ReviewState(
            repetitions=0,
            ease_factor=_clamp_upper(round(new_ef, 2), max_ease_factor),
            interval=1,
        )

    new_ef = max(MIN_EASE_FACTOR, state.ease_factor + ease_delta(signal.quality))
    new_ef = _clamp_upper(round(new_ef, 2), max_ease_factor)

    if state.repetitions == 0:
        new_interval = 1
    elif state.repetitions == 1:
        new_interval = 6
    else:
        new_interval = round_half_up(state.interval * new_ef)

    return ReviewState(
        repetitions=state.repetitions + 1,
        ease_factor=new_ef,
        interval=max(1, new_interval),
    )


def _clamp_upper(ease_factor: float, max_ease_factor: Optional[float]) -> float:
    if max_ease_factor is None:
        return ease_factor
    return max(MIN_EASE_FACTOR, min(max_ease_factor, ease_factor))
