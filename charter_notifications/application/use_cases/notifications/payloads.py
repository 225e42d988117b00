"""Build transport payloads for a persisted notification."""

from __future__ import annotations

import json
from typing import Any

from charter_notifications.domain.entities import ChannelPayload, Notification, PriorityHint


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str, sort_keys=True)


def build_data_map(notification: Notification) -> dict[str, str]:
    """Return the string-only data map sent alongside the visible notification.

    Metadata keys are included first so ``notificationId`` and ``type`` always
    describe the stored record.
    """

    data = {str(key): _stringify(value) for key, value in (notification.metadata or {}).items()}
    data["notificationId"] = str(notification.id)
    data["type"] = notification.type
    return data


def build_channel_payload(notification: Notification, channel: str) -> ChannelPayload:
    """Build the payload delivered on ``channel`` for ``notification``."""

    if notification.id is None:
        raise ValueError("Payloads can only be built for persisted notifications")
    return ChannelPayload(
        channel=channel,
        title=notification.title,
        body=notification.message,
        data=build_data_map(notification),
        priority_hint=PriorityHint.for_priority(notification.priority),
    )


__all__ = ["build_channel_payload", "build_data_map"]
