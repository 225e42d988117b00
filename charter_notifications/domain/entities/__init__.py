"""Domain entities exposed by the application."""

from .notification import (
    CATEGORY_BY_TYPE,
    DELIVERY_STATUS_DELIVERED,
    DELIVERY_STATUS_FAILED,
    DELIVERY_STATUS_PENDING,
    DELIVERY_STATUS_SENT,
    DELIVERY_STATUSES,
    NOTIFICATION_CATEGORIES,
    NOTIFICATION_TYPES,
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    Notification,
    category_for_type,
)
from .payload import ChannelPayload, PriorityHint, PushReceipt
from .preferences import (
    CHANNEL_EMAIL,
    CHANNEL_PUSH,
    CHANNEL_SMS,
    CHANNELS,
    FREQUENCIES,
    PREFERENCE_KEYS,
    NotificationPreferences,
    QuietHours,
)
from .user import User

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
    "ChannelPayload",
    "PriorityHint",
    "PushReceipt",
    "NotificationPreferences",
    "QuietHours",
    "CHANNELS",
    "CHANNEL_PUSH",
    "CHANNEL_EMAIL",
    "CHANNEL_SMS",
    "FREQUENCIES",
    "PREFERENCE_KEYS",
    "User",
]
