"""Tests for the Trust Protect notification side effect."""

from __future__ import annotations

import pytest

from marketplace.application.use_cases.reviews import notify_trust_protect_adjustment
from marketplace.domain.entities import (
    TRUST_PROTECT_APPLIED,
    Event,
    RatingScale,
    ReviewFeedback,
)

pytestmark = pytest.mark.anyio


class CollectingPublisher:
    def __init__(self) -> None:
        self.events: list[Event] = []

    async def publish(self, event: Event) -> None:
        self.events.append(event)


def _review(rating: int) -> ReviewFeedback:
    return ReviewFeedback(
        id="review-1",
        review_giver_id="giver-1",
        review_receiver_id="receiver-1",
        rating=rating,
    )


async def test_trust_protect_tier_publishes_event():
    publisher = CollectingPublisher()

    assert await notify_trust_protect_adjustment(publisher, _review(RatingScale.SAD))

    [event] = publisher.events
    assert event.type == TRUST_PROTECT_APPLIED
    assert event.payload == {
        "review_id": "review-1",
        "review_giver_id": "giver-1",
        "rating": 2,
    }


@pytest.mark.parametrize("rating", [RatingScale.DESPAIR, RatingScale.OKAY, RatingScale.DELIGHT])
async def test_other_ratings_publish_nothing(rating):
    publisher = CollectingPublisher()

    assert not await notify_trust_protect_adjustment(publisher, _review(rating))
    assert publisher.events == []


async def test_missing_review_publishes_nothing():
    publisher = CollectingPublisher()

    assert not await notify_trust_protect_adjustment(publisher, None)
