"""Due-card selection, review ordering and the review write path."""
import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from srs_scheduler.config import get_settings
from srs_scheduler.errors import ValidationError
from srs_scheduler.models import PASSING_QUALITY, Card, resolve_now
from srs_scheduler.policies import SchedulingPolicy, get_policy

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_SESSION_LIMIT = 50

CardLike = Union[Card, Mapping[str, Any]]


def is_due(card: Card, now: datetime) -> bool:
    return card.next_review is None or card.next_review <= now


def get_due_cards(cards: Iterable[CardLike], now: Optional[datetime] = None) -> list[Card]:
    """Cards whose next review has passed, plus never-scheduled ones.

    Input order is kept.
    """
    now = resolve_now(now)
    return [card for card in map(Card.coerce, cards) if is_due(card, now)]


def days_overdue(card: Card, now: datetime) -> float:
    if card.next_review is None:
        return 0.0
    return max(0.0, (now - card.next_review).total_seconds() / SECONDS_PER_DAY)


def calc_priority_score(card: CardLike, now: Optional[datetime] = None) -> float:
    card = Card.coerce(card)
    now = resolve_now(now)
    last_performance = PASSING_QUALITY if card.last_performance is None else card.last_performance
    return (
        days_overdue(card, now) * 2
        + (6 - last_performance) * 1.5
        + 1 / (card.review_count or 1)
    )


def prioritize_cards(cards: Iterable[CardLike], now: Optional[datetime] = None) -> list[Card]:
    """Order due cards most urgent first.

    More overdue, historically harder and less reviewed cards come first.
    Equal scores keep their input order.
    """
    now = resolve_now(now)
    cards = [Card.coerce(c) for c in cards]
    return sorted(cards, key=lambda c: calc_priority_score(c, now), reverse=True)


def build_review_queue(
    cards: Iterable[CardLike],
    now: Optional[datetime] = None,
    limit: Optional[int] = DEFAULT_SESSION_LIMIT,
) -> list[Card]:
    if limit is not None and limit < 0:
        raise ValidationError(f"limit must be non-negative, got {limit}")
    now = resolve_now(now)
    queue = prioritize_cards(get_due_cards(cards, now), now)
    return queue if limit is None else queue[:limit]


def record_review(
    card: CardLike,
    correct: bool,
    quality: Optional[int] = None,
    now: Optional[datetime] = None,
    policy: Optional[SchedulingPolicy] = None,
) -> Card:
    """Apply one review to a card and return the updated copy for persisting."""
    card = Card.coerce(card)
    if policy is None:
        policy = get_policy(get_settings())
    updated = policy.review(card, correct, quality, now)
    logger.debug(
        "Card %r reviewed (%s, correct=%s, quality=%s): interval %s -> %s, next review %s",
        card.id, policy.name, correct, quality, card.interval, updated.interval,
        updated.next_review,
    )
    return updated
