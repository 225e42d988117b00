"""Per-user notification inbox, preferences and device registration."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from charter_notifications.application.use_cases.notifications import (
    get_user_preferences as get_user_preferences_uc,
    list_notifications_for_user as list_notifications_for_user_uc,
    register_device as register_device_uc,
    update_user_preferences as update_user_preferences_uc,
)
from charter_notifications.domain.exceptions import NotFoundError
from charter_notifications.infrastructure.database import get_db
from charter_notifications.interfaces.api.schemas import (
    DeviceRegistrationRequest,
    NotificationPreferencesRead,
    NotificationPreferencesSchema,
    NotificationRead,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/notifications", response_model=list[NotificationRead])
def list_user_notifications(
    user_id: int,
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    """Return the most recent notifications for ``user_id``."""

    try:
        notifications = list_notifications_for_user_uc(
            db, user_id, limit=limit, unread_only=unread_only
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.get(
    "/{user_id}/notification-preferences", response_model=NotificationPreferencesRead
)
def get_notification_preferences(
    user_id: int, db: Session = Depends(get_db)
) -> NotificationPreferencesRead:
    try:
        preferences = get_user_preferences_uc(db, user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationPreferencesRead.from_entity(preferences)


@router.put(
    "/{user_id}/notification-preferences", response_model=NotificationPreferencesRead
)
def update_notification_preferences(
    user_id: int,
    payload: NotificationPreferencesSchema,
    db: Session = Depends(get_db),
) -> NotificationPreferencesRead:
    try:
        preferences = update_user_preferences_uc(db, user_id, payload.to_entity())
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationPreferencesRead.from_entity(preferences)


@router.post("/{user_id}/devices", status_code=status.HTTP_204_NO_CONTENT)
def register_device(
    user_id: int,
    payload: DeviceRegistrationRequest,
    db: Session = Depends(get_db),
) -> None:
    """Register the push token of the user's device."""

    try:
        register_device_uc(db, user_id, token=payload.token)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
