"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from charter_notifications.domain.entities import Notification

NotificationTypeLiteral = Literal[
    "booking",
    "message",
    "payment",
    "maintenance",
    "weather",
    "service_update",
    "promotion",
    "emergency",
    "system",
]
PriorityLiteral = Literal["low", "medium", "high", "urgent"]


class NotificationSendRequest(BaseModel):
    """Payload used by internal services to notify a user."""

    user_id: int
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationTypeLiteral
    priority: PriorityLiteral = "medium"
    metadata: dict[str, Any] = Field(default_factory=dict)
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: str
    category: str
    priority: str
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool
    delivery_status: str
    gateway_message_id: str | None = None
    gateway_error: str | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime
    sent_at: datetime | None = None
    delivered_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            user_id=notification.user_id,
            type=notification.type,
            category=notification.category,
            priority=notification.priority,
            title=notification.title,
            message=notification.message,
            metadata=notification.metadata or {},
            read=notification.read,
            delivery_status=notification.delivery_status,
            gateway_message_id=notification.gateway_message_id,
            gateway_error=notification.gateway_error,
            scheduled_for=notification.scheduled_for,
            expires_at=notification.expires_at,
            created_at=notification.created_at,
            sent_at=notification.sent_at,
            delivered_at=notification.delivered_at,
        )


class NotificationSendResponse(BaseModel):
    """Result of a send request; ``notification`` is null when suppressed."""

    suppressed: bool
    notification: NotificationRead | None = None


class DeliveryFailureRequest(BaseModel):
    """Late failure reported by the push gateway."""

    error: str = Field(..., min_length=1, max_length=2000)


__all__ = [
    "DeliveryFailureRequest",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
]
