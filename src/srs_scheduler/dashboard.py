"""Review statistics and study-load forecasting."""
import math
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

from srs_scheduler.errors import ValidationError
from srs_scheduler.flashcards import CardLike
from srs_scheduler.models import PASSING_QUALITY, Card, ReviewEvent, resolve_now
from srs_scheduler.sm2 import round_half_up

ReviewLike = Union[ReviewEvent, Mapping[str, Any]]


def _as_event(review: ReviewLike) -> ReviewEvent:
    return review if isinstance(review, ReviewEvent) else ReviewEvent.from_dict(review)


def _is_retained(event: ReviewEvent) -> bool:
    if event.performance is not None:
        return event.performance >= PASSING_QUALITY
    return event.correct is True


def calc_review_stats(reviews: Iterable[ReviewLike]) -> dict:
    """Summarize a list of completed reviews.

    Rated reviews count as retained at GOOD (3) or better; unrated ones use
    their correct flag. An empty list gives all zeros.
    """
    events = [_as_event(r) for r in reviews]
    if not events:
        return {
            "total_reviews": 0,
            "average_performance": 0.0,
            "retention_rate": 0.0,
            "time_spent": 0.0,
        }
    rated = [e.performance for e in events if e.performance is not None]
    retained = sum(1 for e in events if _is_retained(e))
    return {
        "total_reviews": len(events),
        "average_performance": round(sum(rated) / len(rated), 2) if rated else 0.0,
        "retention_rate": round(retained * 100 / len(events), 1),
        "time_spent": float(sum(e.time_spent for e in events)),
    }


def calc_accuracy(correct_count: int, total_answered: int) -> int:
    if correct_count < 0 or total_answered < 0:
        raise ValidationError("answer counts must be non-negative")
    if correct_count > total_answered:
        raise ValidationError(
            f"correct_count {correct_count} exceeds total_answered {total_answered}"
        )
    if total_answered == 0:
        return 0
    return round_half_up(correct_count * 100 / total_answered)


def get_accuracy_stats(cards: Iterable[CardLike]) -> dict:
    cards = [Card.coerce(c) for c in cards]
    correct = sum(c.correct_count for c in cards)
    total = correct + sum(c.incorrect_count for c in cards)
    return {
        "total_answered": total,
        "correct_count": correct,
        "accuracy": calc_accuracy(correct, total),
    }


def get_study_schedule(
    cards: Iterable[CardLike], now: Optional[datetime] = None, days: int = 7
) -> dict:
    """Count cards falling due on each of the next ``days`` days.

    Day ``i`` covers ``[now + i days, now + i + 1 days)``. Overdue and
    never-scheduled cards are not part of the forecast.
    """
    if days < 1:
        raise ValidationError(f"days must be at least 1, got {days}")
    now = resolve_now(now)
    cards = [Card.coerce(c) for c in cards]
    schedule = []
    for i in range(days):
        start = now + timedelta(days=i)
        end = start + timedelta(days=1)
        schedule.append({
            "date": start.date(),
            "due_cards": sum(
                1 for c in cards if c.next_review is not None and start <= c.next_review < end
            ),
        })
    total = sum(day["due_cards"] for day in schedule)
    return {
        "schedule": schedule,
        "total_due": total,
        "recommended_per_day": math.ceil(total / days),
    }
