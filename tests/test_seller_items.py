"""Tests for listing duration, expiry and balance charges."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from marketplace.application.use_cases.seller_items import (
    REFUND_REASON,
    change_in_weeks,
    create_listing,
    is_expired_item,
    new_expiry,
    normalize_duration,
    remaining_weeks,
    remove_listing,
    update_listing,
)
from marketplace.domain.entities import SellerItem, StockLevel
from marketplace.domain.errors import BalanceDeductionError

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
WEEK = timedelta(weeks=1)


def _item(duration=None, expired_by=None, **extra) -> SellerItem:
    return SellerItem(id="item-1", seller_id="seller-1", duration=duration, expired_by=expired_by, **extra)


class RecordingLedger:
    """In-memory ledger remembering every charge and refund."""

    def __init__(self, fail_deduction: bool = False) -> None:
        self.calls: list[tuple] = []
        self.fail_deduction = fail_deduction

    def deduct_balance(self, owner_id: str, weeks: int) -> None:
        if self.fail_deduction:
            raise BalanceDeductionError(owner_id, weeks, "Insufficient balance")
        self.calls.append(("deduct", owner_id, weeks))

    def credit_balance(self, owner_id: str, weeks: int, reason: str) -> None:
        self.calls.append(("credit", owner_id, weeks, reason))


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        (None, True),
        (_item(duration=5), True),
        (_item(duration=5, expired_by=NOW - timedelta(days=1)), True),
        (_item(duration=5, expired_by=NOW + timedelta(days=1)), False),
        (_item(duration=5, expired_by=NOW), False),
    ],
)
def test_is_expired_item(item, expected):
    assert is_expired_item(item, NOW) is expected


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        (None, 0),
        (_item(), 0),
        (_item(expired_by=NOW), 0),
        (_item(duration=5), 0),
        (_item(duration=5, expired_by=NOW - WEEK), 0),
        (_item(duration=5, expired_by=NOW + 3 * WEEK), 2),
        (_item(duration=5, expired_by=NOW + 10 * WEEK), 5),
        (_item(duration=5, expired_by=NOW + timedelta(days=3)), 0),
        (_item(duration="abc", expired_by=NOW + 3 * WEEK), 0),
        (_item(duration="4", expired_by=NOW + 10 * WEEK), 4),
    ],
)
def test_remaining_weeks(item, expected):
    """The current week is never counted and the duration caps the result."""

    assert remaining_weeks(item, NOW) == expected


def test_remaining_weeks_accepts_naive_expiry():
    item = _item(duration=5, expired_by=(NOW + 3 * WEEK).replace(tzinfo=None))

    assert remaining_weeks(item, NOW) == 2


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 1), (0, 1), (-3, 1), ("4", 4), (2.7, 2), ("abc", 1), (6, 6)],
)
def test_normalize_duration(value, expected):
    assert normalize_duration(value) == expected


def test_change_in_weeks_extension_and_no_change():
    assert change_in_weeks(_item(duration=2), _item(duration=5), NOW) == 3
    assert change_in_weeks(_item(duration=4), _item(duration=4), NOW) == 0


def test_change_in_weeks_reduction_within_remaining_weeks():
    existing = _item(duration=5, expired_by=NOW + 5 * WEEK)

    assert remaining_weeks(existing, NOW) == 4
    assert change_in_weeks(existing, _item(duration=1), NOW) == -4
    assert change_in_weeks(existing, _item(duration=3), NOW) == -2


def test_change_in_weeks_clamps_excessive_reduction(caplog):
    existing = _item(duration=5, expired_by=NOW + 3 * WEEK)

    with caplog.at_level("WARNING"):
        assert change_in_weeks(existing, _item(duration=1), NOW) == 0

    assert "only 2 weeks remain" in caplog.text


def test_change_in_weeks_without_expiry_cannot_shorten():
    assert change_in_weeks(_item(duration=5), _item(duration=1), NOW) == 0


def test_change_in_weeks_treats_missing_durations_as_one():
    assert change_in_weeks(_item(duration=0), _item(duration=None), NOW) == 0


def test_new_expiry_resets_expired_item():
    existing = _item(duration=3, expired_by=datetime(2024, 12, 1, tzinfo=timezone.utc))

    assert new_expiry(existing, _item(duration=4), NOW) == NOW + 4 * WEEK


def test_new_expiry_defaults_to_one_week():
    existing = _item(expired_by=datetime(2024, 12, 1, tzinfo=timezone.utc))

    assert new_expiry(existing, _item(), NOW) == NOW + WEEK


def test_new_expiry_extends_reduces_or_keeps():
    expiry = NOW + 4 * WEEK
    existing = _item(duration=5, expired_by=expiry)

    assert new_expiry(existing, _item(duration=8), NOW) == expiry + 3 * WEEK
    assert new_expiry(existing, _item(duration=3), NOW) == expiry - 2 * WEEK
    assert new_expiry(existing, _item(duration=5), NOW) == expiry


def test_create_listing_charges_full_duration():
    ledger = RecordingLedger()
    requested = _item(duration=3, name="  Mango  ", stock_level=None)

    update = create_listing(ledger, "seller-9", requested, NOW)

    assert ledger.calls == [("deduct", "seller-9", 3)]
    assert update.consumed_balance == -3
    assert update.item.expired_by == NOW + 3 * WEEK
    assert update.item.name == "Mango"
    assert update.item.seller_id == "seller-9"
    assert update.item.stock_level is StockLevel.AVAILABLE_1


def test_update_listing_charges_extension():
    ledger = RecordingLedger()
    existing = _item(duration=2, expired_by=NOW + 2 * WEEK)

    update = update_listing(ledger, existing, _item(duration=5, price=None), NOW)

    assert ledger.calls == [("deduct", "seller-1", 3)]
    assert update.change_in_weeks == 3
    assert update.consumed_balance == -3
    assert update.item.duration == 5
    assert update.item.expired_by == NOW + 5 * WEEK


def test_update_listing_refunds_reduction():
    ledger = RecordingLedger()
    existing = _item(duration=5, expired_by=NOW + 4 * WEEK)

    update = update_listing(ledger, existing, _item(duration=3, price=None), NOW)

    assert ledger.calls == [("credit", "seller-1", 2, REFUND_REASON)]
    assert update.consumed_balance == 2
    assert update.item.duration == 3
    assert update.item.expired_by == NOW + 2 * WEEK


def test_update_listing_propagates_balance_errors():
    existing = _item(duration=1, expired_by=NOW + 2 * WEEK)

    with pytest.raises(BalanceDeductionError):
        update_listing(RecordingLedger(fail_deduction=True), existing, _item(duration=2), NOW)


def test_remove_listing_refunds_remaining_weeks():
    ledger = RecordingLedger()

    assert remove_listing(ledger, _item(duration=5, expired_by=NOW + 3 * WEEK), NOW) == 2
    assert remove_listing(ledger, _item(duration=5, expired_by=NOW + timedelta(days=2)), NOW) == 0
    assert ledger.calls == [("credit", "seller-1", 2, REFUND_REASON)]


def test_remove_listing_with_unparsable_duration_refunds_nothing():
    item = _item(duration="abc", expired_by=NOW + 3 * WEEK)
    ledger = RecordingLedger()

    assert remove_listing(ledger, item, NOW) == 0
    assert ledger.calls == []
