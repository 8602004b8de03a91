"""Domain entities exposed by the application."""

from .event import (
    ORDER_CREATED,
    SANCTION_CHANGED,
    TRUST_PROTECT_APPLIED,
    Event,
    OrderCreated,
    SanctionChanged,
    TrustProtectApplied,
    deserialize_event,
    serialize_event,
)
from .job import (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_PENDING,
    JOB_STATUS_RUNNING,
    Job,
)
from .notification import Notification, NotificationPage, NotificationStatus
from .review import TRUST_PROTECT_RATING, RatingScale, ReviewFeedback
from .seller_item import SellerItem
from .stock_level import COUNTABLE_LEVELS, UNLIMITED_LEVELS, StockLevel

__all__ = [
    "COUNTABLE_LEVELS",
    "Event",
    "JOB_STATUS_COMPLETED",
    "JOB_STATUS_FAILED",
    "JOB_STATUS_PENDING",
    "JOB_STATUS_RUNNING",
    "Job",
    "Notification",
    "NotificationPage",
    "NotificationStatus",
    "ORDER_CREATED",
    "OrderCreated",
    "RatingScale",
    "ReviewFeedback",
    "SANCTION_CHANGED",
    "SanctionChanged",
    "SellerItem",
    "StockLevel",
    "TRUST_PROTECT_APPLIED",
    "TRUST_PROTECT_RATING",
    "TrustProtectApplied",
    "UNLIMITED_LEVELS",
    "deserialize_event",
    "serialize_event",
]
