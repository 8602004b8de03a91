"""Side effects of review feedback adjustments."""

from __future__ import annotations

import logging

from marketplace.domain.entities import (
    TRUST_PROTECT_RATING,
    ReviewFeedback,
    TrustProtectApplied,
)
from marketplace.infrastructure.events import EventPublisher

logger = logging.getLogger(__name__)


async def notify_trust_protect_adjustment(
    publisher: EventPublisher, review: ReviewFeedback | None
) -> bool:
    """Publish a Trust Protect event when ``review`` was forced to the protected tier.

    Returns ``True`` when an event was published.
    """

    if review is None or review.rating != TRUST_PROTECT_RATING:
        return False

    event = TrustProtectApplied(
        review_id=review.id,
        review_giver_id=review.review_giver_id,
        rating=int(review.rating),
    ).to_event()
    await publisher.publish(event)
    logger.info("Trust Protect adjustment published for review %s", review.id)
    return True


__all__ = ["notify_trust_protect_adjustment"]
