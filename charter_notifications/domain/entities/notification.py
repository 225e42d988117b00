"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_BOOKING = "booking"
NOTIFICATION_TYPE_MESSAGE = "message"
NOTIFICATION_TYPE_PAYMENT = "payment"
NOTIFICATION_TYPE_MAINTENANCE = "maintenance"
NOTIFICATION_TYPE_WEATHER = "weather"
NOTIFICATION_TYPE_SERVICE_UPDATE = "service_update"
NOTIFICATION_TYPE_PROMOTION = "promotion"
NOTIFICATION_TYPE_EMERGENCY = "emergency"
NOTIFICATION_TYPE_SYSTEM = "system"

CATEGORY_TRANSACTION = "transaction"
CATEGORY_COMMUNICATION = "communication"
CATEGORY_SERVICE = "service"
CATEGORY_SAFETY = "safety"
CATEGORY_MARKETING = "marketing"

# Every notification type belongs to exactly one category.
CATEGORY_BY_TYPE: dict[str, str] = {
    NOTIFICATION_TYPE_BOOKING: CATEGORY_TRANSACTION,
    NOTIFICATION_TYPE_PAYMENT: CATEGORY_TRANSACTION,
    NOTIFICATION_TYPE_MESSAGE: CATEGORY_COMMUNICATION,
    NOTIFICATION_TYPE_MAINTENANCE: CATEGORY_SERVICE,
    NOTIFICATION_TYPE_SERVICE_UPDATE: CATEGORY_SERVICE,
    NOTIFICATION_TYPE_SYSTEM: CATEGORY_SERVICE,
    NOTIFICATION_TYPE_WEATHER: CATEGORY_SAFETY,
    NOTIFICATION_TYPE_EMERGENCY: CATEGORY_SAFETY,
    NOTIFICATION_TYPE_PROMOTION: CATEGORY_MARKETING,
}

NOTIFICATION_TYPES: tuple[str, ...] = tuple(CATEGORY_BY_TYPE)
NOTIFICATION_CATEGORIES: tuple[str, ...] = (
    CATEGORY_TRANSACTION,
    CATEGORY_COMMUNICATION,
    CATEGORY_SERVICE,
    CATEGORY_SAFETY,
    CATEGORY_MARKETING,
)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"
PRIORITIES: tuple[str, ...] = (
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_HIGH,
    PRIORITY_URGENT,
)

DELIVERY_STATUS_PENDING = "pending"
DELIVERY_STATUS_SENT = "sent"
DELIVERY_STATUS_DELIVERED = "delivered"
DELIVERY_STATUS_FAILED = "failed"
DELIVERY_STATUSES: tuple[str, ...] = (
    DELIVERY_STATUS_PENDING,
    DELIVERY_STATUS_SENT,
    DELIVERY_STATUS_DELIVERED,
    DELIVERY_STATUS_FAILED,
)


def category_for_type(notification_type: str) -> str:
    """Return the coarse category for ``notification_type`` or raise ``ValueError``."""

    try:
        return CATEGORY_BY_TYPE[notification_type]
    except KeyError:
        msg = f"Unknown notification type '{notification_type}'"
        raise ValueError(msg) from None


@dataclass
class Notification:
    """Message addressed to a user together with its delivery lifecycle."""

    id: int | None
    user_id: int
    type: str
    category: str
    title: str
    message: str
    priority: str = PRIORITY_MEDIUM
    metadata: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    delivery_status: str = DELIVERY_STATUS_PENDING
    gateway_message_id: str | None = None
    gateway_error: str | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None


__all__ = [
    "Notification",
    "category_for_type",
    "CATEGORY_BY_TYPE",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_CATEGORIES",
    "PRIORITIES",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_HIGH",
    "PRIORITY_URGENT",
    "DELIVERY_STATUSES",
    "DELIVERY_STATUS_PENDING",
    "DELIVERY_STATUS_SENT",
    "DELIVERY_STATUS_DELIVERED",
    "DELIVERY_STATUS_FAILED",
]
