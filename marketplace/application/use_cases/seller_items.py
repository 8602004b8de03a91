"""Listing lifetime arithmetic and the balance charges derived from it.

Listings are paid for in weeks. Every function takes an optional ``now`` so
the arithmetic can be evaluated against a fixed clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Protocol

from marketplace.domain.entities import SellerItem, StockLevel
from marketplace.utils import (
    add_weeks,
    ensure_app_timezone,
    now_in_app_timezone,
    whole_weeks_between,
)

logger = logging.getLogger(__name__)

REFUND_REASON = "refund"


class MembershipLedger(Protocol):
    """Balance collaborator charged proportionally to listing weeks."""

    def deduct_balance(self, owner_id: str, weeks: int) -> None:
        ...

    def credit_balance(self, owner_id: str, weeks: int, reason: str) -> None:
        ...


@dataclass
class ListingUpdate:
    """Result of creating or changing a listing.

    ``consumed_balance`` is negative when weeks were charged and positive
    when weeks were refunded.
    """

    item: SellerItem
    change_in_weeks: int
    consumed_balance: int


def normalize_duration(duration: Any) -> int:
    """Coerce ``duration`` to whole weeks, never below one."""

    return max(_whole_weeks(duration) or 1, 1)


def is_expired_item(item: SellerItem | None, now: datetime | None = None) -> bool:
    if item is None or item.expired_by is None:
        return True
    now = now or now_in_app_timezone()
    return ensure_app_timezone(now) > ensure_app_timezone(item.expired_by)


def remaining_weeks(item: SellerItem | None, now: datetime | None = None) -> int:
    """Whole weeks left on ``item`` that could still be refunded.

    The week in progress is never refundable, and the result never exceeds
    the contracted duration. A duration that is not a number leaves nothing
    to refund.
    """

    if item is None or item.expired_by is None or not item.duration:
        return 0
    now = now or now_in_app_timezone()
    weeks_left = whole_weeks_between(now, item.expired_by)
    total_weeks = _whole_weeks(item.duration)
    if not total_weeks or total_weeks < 0:
        return 0
    return min(max(weeks_left - 1, 0), total_weeks)


def change_in_weeks(
    existing: SellerItem, requested: SellerItem, now: datetime | None = None
) -> int:
    """Return the requested duration delta, or 0 when it cannot be honoured.

    Shortening a listing by more weeks than remain on it is clamped to no
    change at all instead of being rejected.
    """

    new_duration = normalize_duration(requested.duration)
    existing_duration = normalize_duration(existing.duration)
    change = new_duration - existing_duration

    if change < 0:
        left = remaining_weeks(existing, now)
        if abs(change) > left:
            logger.warning(
                "Attempted to reduce duration by %s weeks, but only %s weeks remain.",
                abs(change),
                left,
            )
            return 0

    return change


def new_expiry(
    existing: SellerItem, requested: SellerItem, now: datetime | None = None
) -> datetime:
    """Return the expiry date matching the requested duration."""

    now = now or now_in_app_timezone()
    if is_expired_item(existing, now):
        return add_weeks(ensure_app_timezone(now), normalize_duration(requested.duration))

    expiry = ensure_app_timezone(existing.expired_by)
    return add_weeks(expiry, change_in_weeks(existing, requested, now))


def create_listing(
    ledger: MembershipLedger,
    seller_id: str,
    requested: SellerItem,
    now: datetime | None = None,
) -> ListingUpdate:
    """Charge for a new listing and compute its expiry."""

    now = now or now_in_app_timezone()
    duration = normalize_duration(requested.duration)
    ledger.deduct_balance(seller_id, duration)

    item = replace(
        requested,
        seller_id=seller_id,
        name=(requested.name or "").strip(),
        description=(requested.description or "").strip(),
        duration=duration,
        stock_level=requested.stock_level or StockLevel.AVAILABLE_1,
        expired_by=add_weeks(ensure_app_timezone(now), duration),
    )
    logger.info("Seller item created for seller %s (%s weeks)", seller_id, duration)
    return ListingUpdate(item=item, change_in_weeks=duration, consumed_balance=-duration)


def update_listing(
    ledger: MembershipLedger,
    existing: SellerItem,
    requested: SellerItem,
    now: datetime | None = None,
) -> ListingUpdate:
    """Apply a duration change, charging extensions and refunding reductions."""

    now = now or now_in_app_timezone()
    change = change_in_weeks(existing, requested, now)
    logger.info("Change in duration (weeks): %s", change)

    consumed = 0
    if change > 0:
        ledger.deduct_balance(existing.seller_id, change)
        consumed = -change
    elif change < 0:
        ledger.credit_balance(existing.seller_id, abs(change), REFUND_REASON)
        consumed = abs(change)

    item = replace(
        existing,
        name=requested.name if requested.name else existing.name,
        description=requested.description if requested.description else existing.description,
        price=requested.price if requested.price is not None else existing.price,
        image=requested.image or existing.image,
        stock_level=requested.stock_level or existing.stock_level,
        duration=max(normalize_duration(existing.duration) + change, 1),
        expired_by=new_expiry(existing, requested, now),
    )
    return ListingUpdate(item=item, change_in_weeks=change, consumed_balance=consumed)


def remove_listing(
    ledger: MembershipLedger, item: SellerItem, now: datetime | None = None
) -> int:
    """Refund the weeks left on a listing being deleted; return the refund."""

    weeks = remaining_weeks(item, now)
    if weeks:
        ledger.credit_balance(item.seller_id, weeks, REFUND_REASON)
    return weeks


def _whole_weeks(duration: Any) -> int | None:
    try:
        return int(float(duration))
    except (TypeError, ValueError, OverflowError):
        return None


__all__ = [
    "ListingUpdate",
    "MembershipLedger",
    "REFUND_REASON",
    "change_in_weeks",
    "create_listing",
    "is_expired_item",
    "new_expiry",
    "normalize_duration",
    "remaining_weeks",
    "remove_listing",
    "update_listing",
]
