"""Repository implementations for infrastructure layer."""

from .job_repository import JobRepository
from .notification_repository import NotificationRepository

__all__ = ["JobRepository", "NotificationRepository"]
