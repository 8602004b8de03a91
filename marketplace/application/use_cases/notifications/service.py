"""Use cases to create, list and clear user notifications."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from marketplace.domain.entities import Notification, NotificationPage, NotificationStatus
from marketplace.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def add_notification(session: Session, recipient_id: str, reason: str) -> Notification:
    """Persist a new uncleared notification for ``recipient_id``."""

    notification = Notification(
        id=None,
        recipient_id=recipient_id,
        reason=reason,
        is_cleared=False,
    )
    try:
        return NotificationRepository(session).create(notification)
    except Exception as exc:
        session.rollback()
        logger.error("Failed to add notification for recipient %s: %s", recipient_id, exc)
        raise


def toggle_notification_status(session: Session, notification_id: int) -> Notification | None:
    """Flip the cleared flag of a notification; ``None`` when it does not exist."""

    try:
        return NotificationRepository(session).toggle_cleared(notification_id)
    except Exception as exc:
        session.rollback()
        logger.error(
            "Failed to toggle notification status for id %s: %s", notification_id, exc
        )
        raise


def list_notifications(
    session: Session,
    recipient_id: str,
    *,
    skip: Any = None,
    limit: Any = None,
    status: NotificationStatus | str | None = None,
) -> NotificationPage:
    """Return a page of notifications, newest first, plus the total count.

    ``skip`` is clamped to zero or more and ``limit`` to ``[1, 100]`` with a
    default of 20; an unrecognised ``status`` lists every notification.
    """

    offset = normalize_skip(skip)
    page_size = normalize_limit(limit)
    is_cleared = _status_filter(status)
    repository = NotificationRepository(session)
    try:
        items = repository.list_for_recipient(
            recipient_id, skip=offset, limit=page_size, is_cleared=is_cleared
        )
        count = repository.count_for_recipient(recipient_id, is_cleared=is_cleared)
    except Exception as exc:
        logger.error(
            "Failed to get notifications and count for recipient %s: %s", recipient_id, exc
        )
        raise
    return NotificationPage(items=list(items), count=count)


def normalize_skip(skip: Any) -> int:
    return max(0, _as_int(skip) or 0)


def normalize_limit(limit: Any) -> int:
    return min(MAX_PAGE_SIZE, max(1, _as_int(limit) or DEFAULT_PAGE_SIZE))


def parse_status(status: NotificationStatus | str | None) -> NotificationStatus | None:
    if isinstance(status, NotificationStatus):
        return status
    try:
        return NotificationStatus(status)
    except ValueError:
        return None


def _status_filter(status: NotificationStatus | str | None) -> bool | None:
    parsed = parse_status(status)
    if parsed is None:
        return None
    return parsed is NotificationStatus.CLEARED


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "add_notification",
    "list_notifications",
    "normalize_limit",
    "normalize_skip",
    "parse_status",
    "toggle_notification_status",
]
