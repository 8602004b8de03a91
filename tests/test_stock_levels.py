"""Tests for the stock level state machine."""

import pytest

from marketplace.application.use_cases.stock_levels import (
    OrderLine,
    apply_order_quantities,
    next_state_on_consume,
    next_state_on_rollback,
    rollback_order_quantities,
)
from marketplace.domain.entities import StockLevel
from marketplace.domain.errors import StockValidationError


@pytest.mark.parametrize(
    ("state", "quantity", "expected"),
    [
        (StockLevel.AVAILABLE_1, 1, StockLevel.SOLD),
        (StockLevel.AVAILABLE_2, 1, StockLevel.AVAILABLE_1),
        (StockLevel.AVAILABLE_2, 2, StockLevel.SOLD),
        (StockLevel.AVAILABLE_3, 1, StockLevel.AVAILABLE_2),
        (StockLevel.AVAILABLE_3, 2, StockLevel.AVAILABLE_1),
        (StockLevel.AVAILABLE_3, 3, StockLevel.SOLD),
    ],
)
def test_consume_counted_levels(state, quantity, expected):
    assert next_state_on_consume(state, quantity, "item-1") is expected


@pytest.mark.parametrize(
    ("state", "quantity"),
    [
        (StockLevel.AVAILABLE_1, 2),
        (StockLevel.AVAILABLE_2, 3),
        (StockLevel.AVAILABLE_3, 4),
    ],
)
def test_consume_more_than_available_raises(state, quantity):
    with pytest.raises(StockValidationError) as exc_info:
        next_state_on_consume(state, quantity, "item-1")

    assert exc_info.value.item_id == "item-1"
    assert exc_info.value.quantity == quantity


@pytest.mark.parametrize(
    "state",
    [StockLevel.MANY_AVAILABLE, StockLevel.MADE_TO_ORDER, StockLevel.ONGOING_SERVICE],
)
@pytest.mark.parametrize("quantity", [1, 5, 10_000])
def test_consume_unlimited_levels_never_change(state, quantity):
    assert next_state_on_consume(state, quantity) is None


@pytest.mark.parametrize("state", ["UNKNOWN_LEVEL", StockLevel.SOLD])
def test_consume_unhandled_level_raises(state):
    with pytest.raises(StockValidationError):
        next_state_on_consume(state, 1, "item-1")


def test_consume_rejects_non_positive_quantity():
    with pytest.raises(StockValidationError):
        next_state_on_consume(StockLevel.AVAILABLE_2, 0)


def test_consume_accepts_raw_values_and_names():
    assert next_state_on_consume("2 available", 1) is StockLevel.AVAILABLE_1
    assert next_state_on_consume("AVAILABLE_3", 3) is StockLevel.SOLD


@pytest.mark.parametrize(
    ("state", "quantity", "expected"),
    [
        (StockLevel.SOLD, 1, StockLevel.AVAILABLE_1),
        (StockLevel.SOLD, 2, StockLevel.AVAILABLE_2),
        (StockLevel.SOLD, 3, StockLevel.AVAILABLE_3),
        (StockLevel.SOLD, 4, None),
        (StockLevel.AVAILABLE_1, 1, StockLevel.AVAILABLE_2),
        (StockLevel.AVAILABLE_1, 2, StockLevel.AVAILABLE_3),
        (StockLevel.AVAILABLE_1, 3, None),
        (StockLevel.AVAILABLE_2, 1, StockLevel.AVAILABLE_3),
        (StockLevel.AVAILABLE_2, 2, None),
        (StockLevel.AVAILABLE_3, 1, None),
        (StockLevel.MANY_AVAILABLE, 10, None),
        (StockLevel.MADE_TO_ORDER, 5, None),
        (StockLevel.ONGOING_SERVICE, 1, None),
        ("UNKNOWN_LEVEL", 1, None),
    ],
)
def test_rollback(state, quantity, expected):
    assert next_state_on_rollback(state, quantity) == expected


_CAPACITY = {
    StockLevel.SOLD: 0,
    StockLevel.AVAILABLE_1: 1,
    StockLevel.AVAILABLE_2: 2,
    StockLevel.AVAILABLE_3: 3,
}


@pytest.mark.parametrize(
    ("state", "quantity"),
    [
        (StockLevel.AVAILABLE_1, 1),
        (StockLevel.AVAILABLE_2, 1),
        (StockLevel.AVAILABLE_2, 2),
        (StockLevel.AVAILABLE_3, 1),
        (StockLevel.AVAILABLE_3, 2),
        (StockLevel.AVAILABLE_3, 3),
    ],
)
def test_rollback_restores_at_least_the_consumed_capacity(state, quantity):
    """Returning what was sold never leaves less stock than before the sale."""

    consumed = next_state_on_consume(state, quantity)
    restored = next_state_on_rollback(consumed, quantity)

    assert restored is not None
    assert _CAPACITY[restored] >= _CAPACITY[state]


def test_apply_order_quantities_is_all_or_nothing():
    lines = [
        OrderLine("a", StockLevel.AVAILABLE_3, 1),
        OrderLine("b", StockLevel.MANY_AVAILABLE, 7),
        OrderLine("c", StockLevel.AVAILABLE_1, 2),
    ]

    with pytest.raises(StockValidationError) as exc_info:
        apply_order_quantities(lines)

    assert exc_info.value.item_id == "c"


def test_apply_and_rollback_order_quantities():
    lines = [
        OrderLine("a", StockLevel.AVAILABLE_3, 1),
        OrderLine("b", StockLevel.MANY_AVAILABLE, 7),
        OrderLine("c", StockLevel.AVAILABLE_1, 1),
    ]

    assert apply_order_quantities(lines) == [
        ("a", StockLevel.AVAILABLE_2),
        ("c", StockLevel.SOLD),
    ]

    returned = [
        OrderLine("a", StockLevel.AVAILABLE_2, 1),
        OrderLine("c", StockLevel.SOLD, 1),
        OrderLine("d", StockLevel.SOLD, 9),
    ]
    assert rollback_order_quantities(returned) == [
        ("a", StockLevel.AVAILABLE_3),
        ("c", StockLevel.AVAILABLE_1),
    ]
