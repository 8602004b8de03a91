"""Domain entity for review feedback exchanged between users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class RatingScale(IntEnum):
    """Emoji rating scale used by review feedback."""

    DESPAIR = 0
    SAD = 2
    OKAY = 3
    HAPPY = 4
    DELIGHT = 5


TRUST_PROTECT_RATING = RatingScale.SAD


@dataclass
class ReviewFeedback:
    """Rating left by ``review_giver_id`` for ``review_receiver_id``."""

    id: str
    review_giver_id: str
    review_receiver_id: str
    rating: int
    comment: str = ""
    review_date: datetime | None = None


__all__ = ["RatingScale", "ReviewFeedback", "TRUST_PROTECT_RATING"]
