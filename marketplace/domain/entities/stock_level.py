"""Inventory capacity levels of a seller listing."""

from enum import Enum


class StockLevel(str, Enum):
    """Ordered capacity states; three countable levels, then unlimited."""

    AVAILABLE_1 = "1 available"
    AVAILABLE_2 = "2 available"
    AVAILABLE_3 = "3 available"
    MANY_AVAILABLE = "Many available"
    MADE_TO_ORDER = "Made to order"
    ONGOING_SERVICE = "Ongoing service"
    SOLD = "Sold"


COUNTABLE_LEVELS = (
    StockLevel.AVAILABLE_1,
    StockLevel.AVAILABLE_2,
    StockLevel.AVAILABLE_3,
)

UNLIMITED_LEVELS = frozenset(
    {
        StockLevel.MANY_AVAILABLE,
        StockLevel.MADE_TO_ORDER,
        StockLevel.ONGOING_SERVICE,
    }
)


__all__ = ["COUNTABLE_LEVELS", "StockLevel", "UNLIMITED_LEVELS"]
