"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    """Payload used to create a notification for the calling user."""

    reason: str = Field(..., min_length=1, description="Message shown to the user")


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_id: str
    reason: str
    is_cleared: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationPageRead(BaseModel):
    """One page of notifications and the total number available."""

    items: list[NotificationRead] = Field(default_factory=list)
    count: int


__all__ = ["NotificationCreate", "NotificationPageRead", "NotificationRead"]
