"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from charter_notifications.domain.entities import (
    DELIVERY_STATUS_DELIVERED,
    DELIVERY_STATUS_FAILED,
    DELIVERY_STATUS_PENDING,
    DELIVERY_STATUS_SENT,
    Notification,
)
from charter_notifications.domain.exceptions import InvalidTransitionError, NotFoundError
from charter_notifications.infrastructure.models import NotificationModel
from charter_notifications.utils import (
    from_storage_datetime,
    now_in_app_timezone,
    to_storage_datetime,
)

Clock = Callable[[], datetime]


class NotificationRepository:
    """Store notifications and move them through their delivery lifecycle.

    Status changes are issued as a single conditional ``UPDATE`` filtered on the
    current status, so two racing transitions on the same row cannot both
    succeed; the loser gets :class:`InvalidTransitionError`.
    """

    def __init__(self, session: Session, *, clock: Clock = now_in_app_timezone) -> None:
        self.session = session
        self.clock = clock

    def get(self, notification_id: int) -> Notification:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            raise NotFoundError("Notification", notification_id)
        return self._to_entity(model)

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.delivery_status = DELIVERY_STATUS_PENDING
        model.created_at = to_storage_datetime(self.clock())
        model.sent_at = None
        model.delivered_at = None
        model.gateway_message_id = None
        model.gateway_error = None
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_sent(self, notification_id: int, gateway_message_id: str) -> Notification:
        return self._transition(
            notification_id,
            target=DELIVERY_STATUS_SENT,
            allowed=(DELIVERY_STATUS_PENDING,),
            values={
                NotificationModel.gateway_message_id: gateway_message_id,
                NotificationModel.sent_at: to_storage_datetime(self.clock()),
            },
        )

    def mark_delivered(self, notification_id: int) -> Notification:
        return self._transition(
            notification_id,
            target=DELIVERY_STATUS_DELIVERED,
            allowed=(DELIVERY_STATUS_SENT,),
            values={
                NotificationModel.delivered_at: to_storage_datetime(self.clock()),
            },
        )

    def mark_failed(self, notification_id: int, error: str) -> Notification:
        return self._transition(
            notification_id,
            target=DELIVERY_STATUS_FAILED,
            allowed=(DELIVERY_STATUS_PENDING, DELIVERY_STATUS_SENT),
            values={NotificationModel.gateway_error: error},
        )

    def mark_read(self, notification_id: int) -> Notification:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        if not updated:
            self.session.rollback()
            raise NotFoundError("Notification", notification_id)
        self.session.commit()
        return self.get(notification_id)

    def _transition(
        self,
        notification_id: int,
        *,
        target: str,
        allowed: tuple[str, ...],
        values: dict[Any, Any],
    ) -> Notification:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.delivery_status.in_(allowed),
            )
            .update(
                {NotificationModel.delivery_status: target, **values},
                synchronize_session=False,
            )
        )
        if updated:
            self.session.commit()
            return self.get(notification_id)

        self.session.rollback()
        current = (
            self.session.query(NotificationModel.delivery_status)
            .filter(NotificationModel.id == notification_id)
            .scalar()
        )
        if current is None:
            raise NotFoundError("Notification", notification_id)
        raise InvalidTransitionError(notification_id, current, target)

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.user_id = notification.user_id
        model.type = notification.type
        model.category = notification.category
        model.priority = notification.priority
        model.title = notification.title
        model.message = notification.message
        model.metadata_ = dict(notification.metadata or {})
        model.read = bool(notification.read)
        model.scheduled_for = to_storage_datetime(notification.scheduled_for)
        model.expires_at = to_storage_datetime(notification.expires_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            category=model.category,
            title=model.title,
            message=model.message,
            priority=model.priority,
            metadata=dict(model.metadata_ or {}),
            read=bool(model.read),
            delivery_status=model.delivery_status,
            gateway_message_id=model.gateway_message_id,
            gateway_error=model.gateway_error,
            scheduled_for=from_storage_datetime(model.scheduled_for),
            expires_at=from_storage_datetime(model.expires_at),
            created_at=from_storage_datetime(model.created_at),
            sent_at=from_storage_datetime(model.sent_at),
            delivered_at=from_storage_datetime(model.delivered_at),
        )


__all__ = ["NotificationRepository"]
