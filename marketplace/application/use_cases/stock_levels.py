"""Stock level transitions triggered by orders and their cancellation.

Only the first three levels are counted. Consuming more than a counted level
holds is a caller error and raises; returning more than can be represented
is tolerated and leaves the level unchanged so refunds are never blocked.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from marketplace.domain.entities import StockLevel, UNLIMITED_LEVELS
from marketplace.domain.errors import StockValidationError

_CONSUME_TRANSITIONS: dict[StockLevel, tuple[StockLevel, ...]] = {
    StockLevel.AVAILABLE_1: (StockLevel.SOLD,),
    StockLevel.AVAILABLE_2: (StockLevel.AVAILABLE_1, StockLevel.SOLD),
    StockLevel.AVAILABLE_3: (
        StockLevel.AVAILABLE_2,
        StockLevel.AVAILABLE_1,
        StockLevel.SOLD,
    ),
}

_ROLLBACK_TRANSITIONS: dict[StockLevel, tuple[StockLevel, ...]] = {
    StockLevel.SOLD: (
        StockLevel.AVAILABLE_1,
        StockLevel.AVAILABLE_2,
        StockLevel.AVAILABLE_3,
    ),
    StockLevel.AVAILABLE_1: (StockLevel.AVAILABLE_2, StockLevel.AVAILABLE_3),
    StockLevel.AVAILABLE_2: (StockLevel.AVAILABLE_3,),
}


@dataclass(frozen=True)
class OrderLine:
    """Quantity of a listing taken by (or returned from) an order."""

    item_id: str
    stock_level: StockLevel | str
    quantity: int


def next_state_on_consume(
    state: StockLevel | str,
    quantity: int,
    item_id: str | None = None,
) -> StockLevel | None:
    """Return the level after selling ``quantity`` units, ``None`` if unchanged."""

    level = _coerce(state)
    if level is None:
        raise StockValidationError(
            f"Unhandled stock level {state!r} for item {item_id}",
            item_id=item_id,
            state=state,
            quantity=quantity,
        )
    if level in UNLIMITED_LEVELS:
        return None
    if quantity < 1:
        raise StockValidationError(
            f"Quantity must be positive for item {item_id}, got {quantity}",
            item_id=item_id,
            state=level,
            quantity=quantity,
        )

    transitions = _CONSUME_TRANSITIONS.get(level)
    if transitions is None:
        raise StockValidationError(
            f"Unhandled stock level {level.value!r} for item {item_id}",
            item_id=item_id,
            state=level,
            quantity=quantity,
        )
    if quantity > len(transitions):
        raise StockValidationError(
            f"Requested quantity {quantity} exceeds available stock "
            f"({level.value}) for item {item_id}",
            item_id=item_id,
            state=level,
            quantity=quantity,
        )
    return transitions[quantity - 1]


def next_state_on_rollback(state: StockLevel | str, quantity: int) -> StockLevel | None:
    """Return the level after ``quantity`` units come back, ``None`` if undefined."""

    level = _coerce(state)
    transitions = _ROLLBACK_TRANSITIONS.get(level) if level is not None else None
    if transitions is None or not 1 <= quantity <= len(transitions):
        return None
    return transitions[quantity - 1]


def apply_order_quantities(lines: Iterable[OrderLine]) -> list[tuple[str, StockLevel]]:
    """Compute the stock updates of an order, all or nothing.

    Every line is validated before anything is returned, so one invalid line
    rejects the whole order.
    """

    updates: list[tuple[str, StockLevel]] = []
    for line in lines:
        new_level = next_state_on_consume(line.stock_level, line.quantity, line.item_id)
        if new_level is not None:
            updates.append((line.item_id, new_level))
    return updates


def rollback_order_quantities(lines: Iterable[OrderLine]) -> list[tuple[str, StockLevel]]:
    """Compute the stock updates restoring the quantities of a cancelled order."""

    updates: list[tuple[str, StockLevel]] = []
    for line in lines:
        new_level = next_state_on_rollback(line.stock_level, line.quantity)
        if new_level is not None:
            updates.append((line.item_id, new_level))
    return updates


def _coerce(state: StockLevel | str) -> StockLevel | None:
    if isinstance(state, StockLevel):
        return state
    try:
        return StockLevel(state)
    except ValueError:
        pass
    if isinstance(state, str):
        return StockLevel.__members__.get(state)
    return None


__all__ = [
    "OrderLine",
    "apply_order_quantities",
    "next_state_on_consume",
    "next_state_on_rollback",
    "rollback_order_quantities",
]
