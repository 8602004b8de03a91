"""Endpoints to read, create and clear the caller's notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from marketplace.application.use_cases.notifications import (
    add_notification,
    list_notifications,
    toggle_notification_status,
)
from marketplace.infrastructure.database import get_db
from marketplace.interfaces.api.dependencies import get_current_user_id
from marketplace.interfaces.api.schemas import (
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationPageRead)
def get_notifications(
    skip: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationPageRead:
    """Return a page of the caller's notifications, newest first."""

    page = list_notifications(db, user_id, skip=skip, limit=limit, status=status_filter)
    return NotificationPageRead(
        items=[NotificationRead.model_validate(item) for item in page.items],
        count=page.count,
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationRead:
    """Create a notification addressed to the caller."""

    notification = add_notification(db, user_id, payload.reason)
    return NotificationRead.model_validate(notification)


@router.put("/{notification_id}", response_model=NotificationRead)
def update_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
) -> NotificationRead:
    """Toggle the cleared flag of a notification."""

    notification = toggle_notification_status(db, notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found or could not be updated",
        )
    logger.info("Notification %s updated (cleared=%s)", notification.id, notification.is_cleared)
    return NotificationRead.model_validate(notification)
