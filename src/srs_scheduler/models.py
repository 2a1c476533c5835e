"""Data classes for the scheduling domain model."""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional, Union

from srs_scheduler.errors import StateInconsistencyError, ValidationError

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
MIN_DIFFICULTY = 0.3
MAX_DIFFICULTY = 2.5
DEFAULT_DIFFICULTY = 0.3
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3  # GOOD


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    return parse_timestamp(now) or now_utc()


def validate_quality(quality: Any) -> int:
    """Return quality unchanged if it is an integer rating in [0, 5]."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ValidationError(f"quality must be an integer 0-5, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValidationError(f"quality must be between 0 and 5, got {quality}")
    return quality


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce ISO strings, epoch milliseconds, dates and datetimes to aware UTC datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise ValidationError(f"invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise ValidationError(f"invalid timestamp: {value!r}") from e
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"invalid timestamp: {value!r}") from e
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValidationError(f"invalid timestamp: {value!r}")


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(result):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return result


@dataclass(frozen=True)
class ReviewState:
    """SM-2 scheduling state carried by a card."""

    repetitions: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0

    def validate(self) -> "ReviewState":
        if not self.ease_factor >= MIN_EASE_FACTOR:
            raise StateInconsistencyError(f"ease_factor {self.ease_factor} is below {MIN_EASE_FACTOR}")
        if self.repetitions < 0:
            raise StateInconsistencyError(f"repetitions must be non-negative, got {self.repetitions}")
        if self.interval < 0:
            raise StateInconsistencyError(f"interval must be non-negative, got {self.interval}")
        if self.repetitions > 0 and self.interval < 1:
            raise StateInconsistencyError(
                f"reviewed card ({self.repetitions} repetitions) has interval {self.interval}"
            )
        return self


@dataclass(frozen=True)
class DifficultyState:
    """State of the additive difficulty model."""

    difficulty: float = DEFAULT_DIFFICULTY
    interval: int = 0

    def validate(self) -> "DifficultyState":
        if not MIN_DIFFICULTY <= self.difficulty <= MAX_DIFFICULTY:
            raise StateInconsistencyError(
                f"difficulty {self.difficulty} is outside [{MIN_DIFFICULTY}, {MAX_DIFFICULTY}]"
            )
        if self.interval < 0:
            raise StateInconsistencyError(f"interval must be non-negative, got {self.interval}")
        return self


@dataclass(frozen=True)
class QualitySignal:
    correct: bool
    quality: Optional[int] = None

    @classmethod
    def from_rating(cls, quality: int) -> "QualitySignal":
        """Build a signal from a bare 0-5 rating; 3 and above counts as correct."""
        validate_quality(quality)
        return cls(correct=quality >= PASSING_QUALITY, quality=quality)


@dataclass(frozen=True)
class DifficultySignal:
    was_correct: bool
    current_difficulty: float = DEFAULT_DIFFICULTY


@dataclass
class Card:
    id: Any
    repetitions: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    difficulty: float = DEFAULT_DIFFICULTY
    next_review: Optional[datetime] = None
    last_review: Optional[datetime] = None
    review_count: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    last_performance: Optional[int] = None

    def __post_init__(self):
        self.next_review = parse_timestamp(self.next_review)
        self.last_review = parse_timestamp(self.last_review)

    @classmethod
    def new(cls, card_id: Any, now: Optional[datetime] = None) -> "Card":
        """A freshly created card, due immediately."""
        return cls(id=card_id, next_review=resolve_now(now))

    @classmethod
    def coerce(cls, value: Union["Card", Mapping[str, Any]]) -> "Card":
        return value if isinstance(value, cls) else cls.from_dict(value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Card":
        """Build a card from a stored record.

        Accepts snake_case or camelCase keys, an optional nested ``studyStats``
        object and timestamps as ISO strings, epoch milliseconds or datetimes.
        Missing optional fields take their defaults.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"card record must be a mapping, got {type(data).__name__}")
        stats = _pick(data, "studyStats", "study_stats", default={})
        if not isinstance(stats, Mapping):
            raise ValidationError(f"studyStats must be a mapping, got {type(stats).__name__}")
        merged = {**data, **stats}
        card_id = _pick(merged, "id", "_id")
        if card_id is None:
            raise ValidationError("card record has no id")
        last_performance = _pick(merged, "last_performance", "lastPerformance")
        return cls(
            id=card_id,
            repetitions=_as_int(_pick(merged, "repetitions", default=0), "repetitions"),
            ease_factor=_as_float(
                _pick(merged, "ease_factor", "easeFactor", default=DEFAULT_EASE_FACTOR), "ease_factor"
            ),
            interval=_as_int(_pick(merged, "interval", default=0), "interval"),
            difficulty=_as_float(
                _pick(merged, "difficulty", default=DEFAULT_DIFFICULTY), "difficulty"
            ),
            next_review=parse_timestamp(_pick(merged, "next_review", "nextReview")),
            last_review=parse_timestamp(
                _pick(merged, "last_review", "lastReview", "lastReviewed")
            ),
            review_count=_as_int(
                _pick(merged, "review_count", "reviewCount", "timesReviewed", default=0), "review_count"
            ),
            correct_count=_as_int(
                _pick(merged, "correct_count", "correctCount", default=0), "correct_count"
            ),
            incorrect_count=_as_int(
                _pick(merged, "incorrect_count", "incorrectCount", default=0), "incorrect_count"
            ),
            last_performance=(
                None if last_performance is None else _as_int(last_performance, "last_performance")
            ),
        )

    @property
    def review_state(self) -> ReviewState:
        return ReviewState(
            repetitions=self.repetitions, ease_factor=self.ease_factor, interval=self.interval
        )

    @property
    def difficulty_state(self) -> DifficultyState:
        return DifficultyState(difficulty=self.difficulty, interval=self.interval)

    def validate_counters(self) -> "Card":
        for name in ("review_count", "correct_count", "incorrect_count"):
            if getattr(self, name) < 0:
                raise StateInconsistencyError(f"{name} must be non-negative on card {self.id!r}")
        return self


@dataclass(frozen=True)
class ReviewEvent:
    """One completed review, as kept in a review log."""

    performance: Optional[int] = None
    correct: Optional[bool] = None
    time_spent: float = 0.0
    reviewed_at: Optional[datetime] = None

    def __post_init__(self):
        if self.performance is not None:
            validate_quality(self.performance)
        if self.correct is not None and not isinstance(self.correct, bool):
            raise ValidationError(f"correct must be true or false, got {self.correct!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReviewEvent":
        if not isinstance(data, Mapping):
            raise ValidationError(f"review record must be a mapping, got {type(data).__name__}")
        performance = _pick(data, "performance", "rating", "quality")
        correct = _pick(data, "correct", "wasCorrect", "is_correct", "isCorrect")
        return cls(
            performance=None if performance is None else _as_int(performance, "performance"),
            correct=correct,
            time_spent=_as_float(_pick(data, "time_spent", "timeSpent", default=0), "time_spent"),
            reviewed_at=parse_timestamp(_pick(data, "reviewed_at", "reviewedAt")),
        )
