"""Exceptions raised by domain rules."""

from __future__ import annotations

from typing import Any


class StockValidationError(ValueError):
    """Raised when a stock level transition is structurally impossible."""

    def __init__(
        self,
        message: str,
        *,
        item_id: str | None = None,
        state: Any = None,
        quantity: int | None = None,
    ) -> None:
        super().__init__(message)
        self.item_id = item_id
        self.state = state
        self.quantity = quantity


class BalanceDeductionError(RuntimeError):
    """Raised by a membership ledger when a listing cannot be paid for."""

    def __init__(self, owner_id: str, amount: int, message: str) -> None:
        super().__init__(message)
        self.owner_id = owner_id
        self.amount = amount


class EventPayloadError(ValueError):
    """Raised when an event payload does not match its declared type."""


__all__ = ["BalanceDeductionError", "EventPayloadError", "StockValidationError"]
