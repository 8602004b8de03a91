"""Domain events exchanged between marketplace operations and handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from marketplace.domain.errors import EventPayloadError

SANCTION_CHANGED = "sanction.event"
ORDER_CREATED = "order.created"
TRUST_PROTECT_APPLIED = "review.trust_protect"


@dataclass(frozen=True)
class Event:
    """Immutable notification of something that happened in the marketplace.

    ``payload`` is interpreted per ``type`` by the handlers; ``metadata``
    carries auxiliary context and never takes part in dispatch decisions.
    """

    type: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not self.type.strip():
            raise ValueError("Event type must be a non-empty string")
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload or {})))
        if self.metadata is not None:
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


@dataclass(frozen=True)
class SanctionChanged:
    """A seller entered or left a sanctioned area."""

    seller_id: str
    is_restricted: bool

    def to_event(self, metadata: Mapping[str, Any] | None = None) -> Event:
        return Event(
            SANCTION_CHANGED,
            {"seller_id": self.seller_id, "isRestricted": self.is_restricted},
            metadata,
        )

    @classmethod
    def from_event(cls, event: Event) -> "SanctionChanged":
        _expect_type(event, SANCTION_CHANGED)
        payload = event.payload
        restricted = payload.get("isRestricted", payload.get("is_restricted"))
        if not isinstance(restricted, bool):
            raise EventPayloadError("Sanction event requires a boolean 'isRestricted' flag")
        return cls(seller_id=_required_str(payload, "seller_id"), is_restricted=restricted)


@dataclass(frozen=True)
class OrderCreated:
    """An order was placed; ``reason`` is shown to ``recipient_id`` verbatim."""

    recipient_id: str
    reason: str
    order_id: str | None = None

    def to_event(self, metadata: Mapping[str, Any] | None = None) -> Event:
        payload: dict[str, Any] = {"pi_uid": self.recipient_id, "reason": self.reason}
        if self.order_id is not None:
            payload["order_id"] = self.order_id
        return Event(ORDER_CREATED, payload, metadata)

    @classmethod
    def from_event(cls, event: Event) -> "OrderCreated":
        _expect_type(event, ORDER_CREATED)
        payload = event.payload
        key = "pi_uid" if "pi_uid" in payload else "recipient_id"
        order_id = payload.get("order_id")
        return cls(
            recipient_id=_required_str(payload, key),
            reason=_required_str(payload, "reason"),
            order_id=str(order_id) if order_id is not None else None,
        )


@dataclass(frozen=True)
class TrustProtectApplied:
    """Trust Protect forced the rating of a review down."""

    review_id: str
    review_giver_id: str
    rating: int

    def to_event(self, metadata: Mapping[str, Any] | None = None) -> Event:
        return Event(
            TRUST_PROTECT_APPLIED,
            {
                "review_id": self.review_id,
                "review_giver_id": self.review_giver_id,
                "rating": self.rating,
            },
            metadata,
        )

    @classmethod
    def from_event(cls, event: Event) -> "TrustProtectApplied":
        _expect_type(event, TRUST_PROTECT_APPLIED)
        payload = event.payload
        rating = payload.get("rating")
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise EventPayloadError("Trust Protect event requires an integer 'rating'")
        return cls(
            review_id=_required_str(payload, "review_id"),
            review_giver_id=_required_str(payload, "review_giver_id"),
            rating=rating,
        )


def serialize_event(event: Event) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``event``."""

    data: dict[str, Any] = {"type": event.type, "payload": dict(event.payload)}
    if event.metadata is not None:
        data["metadata"] = dict(event.metadata)
    _normalize_values(data)
    return data


def deserialize_event(data: Mapping[str, Any]) -> Event:
    """Rebuild an :class:`Event` from :func:`serialize_event` output."""

    if not isinstance(data, Mapping):
        raise EventPayloadError("Serialized event must be a mapping")
    payload = data.get("payload") or {}
    metadata = data.get("metadata")
    if not isinstance(payload, Mapping):
        raise EventPayloadError("Serialized event payload must be a mapping")
    if metadata is not None and not isinstance(metadata, Mapping):
        raise EventPayloadError("Serialized event metadata must be a mapping")
    try:
        return Event(type=data.get("type", ""), payload=payload, metadata=metadata)
    except ValueError as exc:
        raise EventPayloadError(str(exc)) from exc


def _normalize_values(data: dict[str, Any] | list[Any]) -> None:
    """Convert nested ``datetime`` and mapping values into JSON friendly types."""

    items = data.items() if isinstance(data, dict) else enumerate(data)
    for key, value in list(items):
        if isinstance(value, datetime):
            data[key] = value.isoformat()
        elif isinstance(value, Mapping):
            data[key] = dict(value)
            _normalize_values(data[key])
        elif isinstance(value, (list, tuple)):
            data[key] = list(value)
            _normalize_values(data[key])


def _expect_type(event: Event, expected: str) -> None:
    if event.type != expected:
        raise EventPayloadError(f"Expected a '{expected}' event, got '{event.type}'")


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise EventPayloadError(f"Event payload is missing '{key}'")
    if isinstance(value, (dict, list, tuple, set, bool)):
        raise EventPayloadError(f"Event payload field '{key}' must be a scalar")
    return str(value)


__all__ = [
    "Event",
    "ORDER_CREATED",
    "OrderCreated",
    "SANCTION_CHANGED",
    "SanctionChanged",
    "TRUST_PROTECT_APPLIED",
    "TrustProtectApplied",
    "deserialize_event",
    "serialize_event",
]
