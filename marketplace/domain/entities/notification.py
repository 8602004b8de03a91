"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NotificationStatus(str, Enum):
    """Filter values accepted when listing notifications."""

    CLEARED = "cleared"
    UNCLEARED = "uncleared"


@dataclass
class Notification:
    """Message addressed to a marketplace user."""

    id: int | None
    recipient_id: str
    reason: str
    is_cleared: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class NotificationPage:
    """One page of notifications together with the total matching count."""

    items: list[Notification] = field(default_factory=list)
    count: int = 0


__all__ = ["Notification", "NotificationPage", "NotificationStatus"]
