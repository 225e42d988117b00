"""Read access to stored notifications and delivery receipts."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from charter_notifications.domain.entities import Notification
from charter_notifications.domain.exceptions import NotFoundError
from charter_notifications.infrastructure.repositories import (
    NotificationRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def get_notification(session: Session, notification_id: int) -> Notification:
    """Return the notification identified by ``notification_id``."""

    return NotificationRepository(session).get(notification_id)


def list_notifications_for_user(
    session: Session,
    user_id: int,
    *,
    limit: int | None = 50,
    unread_only: bool = False,
) -> Sequence[Notification]:
    """Return the newest notifications addressed to ``user_id``."""

    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User", user_id)
    return NotificationRepository(session).list_for_user(
        user_id, limit=limit, unread_only=unread_only
    )


def mark_notification_read(session: Session, notification_id: int) -> Notification:
    return NotificationRepository(session).mark_read(notification_id)


def record_delivery_receipt(session: Session, notification_id: int) -> Notification:
    """Handle the gateway callback confirming the device received the push."""

    notification = NotificationRepository(session).mark_delivered(notification_id)
    logger.info("Notification %s delivered", notification_id)
    return notification


def record_delivery_failure(
    session: Session, notification_id: int, *, error: str
) -> Notification:
    """Handle a late gateway failure reported after the push was accepted."""

    notification = NotificationRepository(session).mark_failed(notification_id, error)
    logger.warning("Notification %s failed after dispatch: %s", notification_id, error)
    return notification


__all__ = [
    "get_notification",
    "list_notifications_for_user",
    "mark_notification_read",
    "record_delivery_receipt",
    "record_delivery_failure",
]
