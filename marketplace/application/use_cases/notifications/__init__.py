"""Public helpers for storing notifications and reacting to domain events."""

from .handlers import (
    NotificationEventHandler,
    OrderEventHandler,
    SanctionEventHandler,
    TrustProtectEventHandler,
)
from .service import (
    add_notification,
    list_notifications,
    toggle_notification_status,
)

__all__ = [
    "NotificationEventHandler",
    "OrderEventHandler",
    "SanctionEventHandler",
    "TrustProtectEventHandler",
    "add_notification",
    "list_notifications",
    "toggle_notification_status",
]
