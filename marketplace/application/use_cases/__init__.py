"""Aggregate application use cases."""

from .notifications import add_notification, list_notifications, toggle_notification_status
from .stock_levels import next_state_on_consume, next_state_on_rollback

__all__ = [
    "add_notification",
    "list_notifications",
    "next_state_on_consume",
    "next_state_on_rollback",
    "toggle_notification_status",
]
