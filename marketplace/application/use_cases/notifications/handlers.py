"""Event handlers that turn domain events into user notifications.

Each handler swallows its own failures: notification delivery must never
block the operation that emitted the event. The registry isolates them a
second time.
"""

from __future__ import annotations

import logging

import anyio

from marketplace.domain.entities import (
    ORDER_CREATED,
    SANCTION_CHANGED,
    TRUST_PROTECT_APPLIED,
    Event,
    OrderCreated,
    SanctionChanged,
    TrustProtectApplied,
)
from marketplace.infrastructure.database import SessionFactory

from .service import add_notification

logger = logging.getLogger(__name__)

SANCTIONED_MESSAGE = (
    "Your Sell Center is in a Pi Network sanctioned area, so your map marker "
    "will no longer appear in searches."
)
UNSANCTIONED_MESSAGE = (
    "Your Sell Center is no longer in a Pi Network sanctioned area, so your map "
    "marker will now be visible in searches."
)
TRUST_PROTECT_MESSAGE = (
    "Your review has been adjusted by Trust Protect you can reverse back the "
    "rating in the review screen."
)


class NotificationEventHandler:
    """Base class for handlers selecting events by their type tag."""

    event_type: str = ""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    async def supports(self, event: Event) -> bool:
        return event.type == self.event_type

    async def _notify(self, recipient_id: str, reason: str) -> None:
        # The thread is abandoned on cancellation; the write may still complete.
        await anyio.to_thread.run_sync(
            self._store, recipient_id, reason, abandon_on_cancel=True
        )

    def _store(self, recipient_id: str, reason: str) -> None:
        with self._session_factory() as session:
            add_notification(session, recipient_id, reason)


class SanctionEventHandler(NotificationEventHandler):
    """Tell a seller whether their map marker is hidden by a sanction."""

    event_type = SANCTION_CHANGED

    async def handle(self, event: Event) -> None:
        seller_id = event.payload.get("seller_id")
        try:
            change = SanctionChanged.from_event(event)
            message = SANCTIONED_MESSAGE if change.is_restricted else UNSANCTIONED_MESSAGE
            await self._notify(change.seller_id, message)
        except Exception:
            logger.warning(
                "Failed to add sanction notification for seller %s", seller_id, exc_info=True
            )


class OrderEventHandler(NotificationEventHandler):
    """Forward the reason carried by an order event to its recipient."""

    event_type = ORDER_CREATED

    async def handle(self, event: Event) -> None:
        recipient_id = event.payload.get("pi_uid", event.payload.get("recipient_id"))
        try:
            order = OrderCreated.from_event(event)
            await self._notify(order.recipient_id, order.reason)
        except Exception:
            logger.warning(
                "Failed to add order notification for user %s", recipient_id, exc_info=True
            )


class TrustProtectEventHandler(NotificationEventHandler):
    """Let a review giver know Trust Protect changed their rating."""

    event_type = TRUST_PROTECT_APPLIED

    async def handle(self, event: Event) -> None:
        giver_id = event.payload.get("review_giver_id")
        try:
            adjustment = TrustProtectApplied.from_event(event)
            await self._notify(adjustment.review_giver_id, TRUST_PROTECT_MESSAGE)
            logger.info(
                "Notification sent to review giver %s for Trust Protect adjustment.",
                adjustment.review_giver_id,
            )
        except Exception:
            logger.warning(
                "Failed to add Trust Protect notification for user %s", giver_id, exc_info=True
            )


__all__ = [
    "NotificationEventHandler",
    "OrderEventHandler",
    "SANCTIONED_MESSAGE",
    "SanctionEventHandler",
    "TRUST_PROTECT_MESSAGE",
    "TrustProtectEventHandler",
    "UNSANCTIONED_MESSAGE",
]
