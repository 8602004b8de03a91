"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from marketplace.domain.entities import Notification
from marketplace.infrastructure.models import NotificationModel
from marketplace.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model is not None else None

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        skip: int = 0,
        limit: int | None = 20,
        is_cleared: bool | None = None,
    ) -> Sequence[Notification]:
        query = (
            select(NotificationModel)
            .where(*self._filters(recipient_id, is_cleared))
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in self.session.scalars(query)]

    def count_for_recipient(
        self, recipient_id: str, *, is_cleared: bool | None = None
    ) -> int:
        query = (
            select(func.count())
            .select_from(NotificationModel)
            .where(*self._filters(recipient_id, is_cleared))
        )
        return int(self.session.scalar(query) or 0)

    def create(self, notification: Notification) -> Notification:
        now = ensure_app_naive_datetime(now_in_app_timezone())
        model = NotificationModel(
            recipient_id=notification.recipient_id,
            reason=notification.reason,
            is_cleared=notification.is_cleared,
            created_at=ensure_app_naive_datetime(notification.created_at) or now,
            updated_at=now,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def toggle_cleared(self, notification_id: int) -> Notification | None:
        """Flip ``is_cleared`` in place, returning ``None`` for unknown ids."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        model.is_cleared = not model.is_cleared
        model.updated_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _filters(recipient_id: str, is_cleared: bool | None) -> list:
        filters = [NotificationModel.recipient_id == recipient_id]
        if is_cleared is not None:
            filters.append(NotificationModel.is_cleared == is_cleared)
        return filters

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            reason=model.reason,
            is_cleared=bool(model.is_cleared),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]
