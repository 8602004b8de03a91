"""Pydantic schemas exposed by the HTTP interface."""

from .notification import NotificationCreate, NotificationPageRead, NotificationRead

__all__ = ["NotificationCreate", "NotificationPageRead", "NotificationRead"]
