"""Load a deck export (cards plus review log) from JSON."""
import json
from pathlib import Path
from typing import Union

from srs_scheduler.errors import ValidationError
from srs_scheduler.models import Card, ReviewEvent


def load_deck(path: Union[str, Path]) -> tuple[list[Card], list[ReviewEvent]]:
    """Read ``{"cards": [...], "reviews": [...]}``; a bare list is read as cards."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ValidationError(f"{path} is not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path} is not valid JSON: {e}") from e
    if isinstance(data, list):
        data = {"cards": data}
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must hold an object or a list of cards")
    cards = [Card.from_dict(c) for c in data.get("cards", [])]
    reviews = [ReviewEvent.from_dict(r) for r in data.get("reviews", [])]
    return cards, reviews
