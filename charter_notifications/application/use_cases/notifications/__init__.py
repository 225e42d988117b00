"""Public helpers for recording and delivering notifications."""

from charter_notifications.domain.entities import ChannelPayload, PriorityHint, PushReceipt

from .dispatch import NotificationDispatcher
from .inbox import (
    get_notification,
    list_notifications_for_user,
    mark_notification_read,
    record_delivery_failure,
    record_delivery_receipt,
)
from .payloads import build_channel_payload
from .ports import ChannelSender, PushGateway
from .preferences import NotificationCandidate, PreferenceResolution, resolve_preferences
from .quiet_hours import is_within_window
from .settings import get_user_preferences, register_device, update_user_preferences

__all__ = [
    "NotificationDispatcher",
    "get_notification",
    "list_notifications_for_user",
    "mark_notification_read",
    "record_delivery_receipt",
    "record_delivery_failure",
    "ChannelPayload",
    "PriorityHint",
    "build_channel_payload",
    "ChannelSender",
    "PushGateway",
    "PushReceipt",
    "NotificationCandidate",
    "PreferenceResolution",
    "resolve_preferences",
    "is_within_window",
    "get_user_preferences",
    "register_device",
    "update_user_preferences",
]
