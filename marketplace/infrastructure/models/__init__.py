"""ORM models used by the application infrastructure."""

from .job import JobModel
from .notification import NotificationModel

__all__ = ["JobModel", "NotificationModel"]
