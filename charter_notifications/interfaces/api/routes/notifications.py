"""Endpoints for sending notifications and tracking their delivery."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from charter_notifications.application.use_cases.notifications import (
    NotificationDispatcher,
    get_notification as get_notification_uc,
    mark_notification_read as mark_notification_read_uc,
    record_delivery_failure as record_delivery_failure_uc,
    record_delivery_receipt as record_delivery_receipt_uc,
)
from charter_notifications.domain.exceptions import InvalidTransitionError, NotFoundError
from charter_notifications.infrastructure.database import get_db
from charter_notifications.interfaces.api.dependencies import get_dispatcher
from charter_notifications.interfaces.api.schemas import (
    DeliveryFailureRequest,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/", response_model=NotificationSendResponse)
def send_notification(
    payload: NotificationSendRequest,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationSendResponse:
    """Record a notification for a user and deliver it when their preferences allow."""

    try:
        notification = dispatcher.send(
            user_id=payload.user_id,
            title=payload.title,
            message=payload.message,
            notification_type=payload.type,
            priority=payload.priority,
            metadata=payload.metadata,
            scheduled_for=payload.scheduled_for,
            expires_at=payload.expires_at,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if notification is None:
        return NotificationSendResponse(suppressed=True)
    return NotificationSendResponse(
        suppressed=False, notification=NotificationRead.from_entity(notification)
    )


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(notification_id: int, db: Session = Depends(get_db)) -> NotificationRead:
    try:
        notification = get_notification_uc(db, notification_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationRead.from_entity(notification)


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int, db: Session = Depends(get_db)
) -> NotificationRead:
    try:
        notification = mark_notification_read_uc(db, notification_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationRead.from_entity(notification)


@router.post("/{notification_id}/delivered", response_model=NotificationRead)
def confirm_delivery(notification_id: int, db: Session = Depends(get_db)) -> NotificationRead:
    """Gateway callback: the device acknowledged the push."""

    try:
        notification = record_delivery_receipt_uc(db, notification_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return NotificationRead.from_entity(notification)


@router.post("/{notification_id}/failed", response_model=NotificationRead)
def report_delivery_failure(
    notification_id: int,
    payload: DeliveryFailureRequest,
    db: Session = Depends(get_db),
) -> NotificationRead:
    """Gateway callback: delivery failed after the push was accepted."""

    try:
        notification = record_delivery_failure_uc(db, notification_id, error=payload.error)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return NotificationRead.from_entity(notification)
