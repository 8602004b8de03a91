"""Domain entity describing a listing published by a seller."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .stock_level import StockLevel


@dataclass
class SellerItem:
    """Subset of a seller listing needed to charge for its lifetime.

    ``duration`` is the contracted lifetime in weeks and ``expired_by`` is
    always derived from it by the listing use cases.
    """

    id: str | None
    seller_id: str
    name: str = ""
    description: str = ""
    price: float = 0.01
    duration: int | None = 1
    expired_by: datetime | None = None
    stock_level: StockLevel | str | None = StockLevel.AVAILABLE_1
    image: str | None = None


__all__ = ["SellerItem"]
