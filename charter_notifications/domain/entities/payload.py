"""Transport-neutral messages exchanged with delivery channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .notification import PRIORITY_URGENT


@dataclass(frozen=True)
class PriorityHint:
    """Platform urgency hints derived from the notification priority."""

    android_priority: str = "normal"
    android_notification_priority: str = "default"
    apns_sound: str = "default"
    apns_badge: int = 1

    @classmethod
    def for_priority(cls, priority: str) -> "PriorityHint":
        if priority == PRIORITY_URGENT:
            return cls(
                android_priority="high",
                android_notification_priority="max",
                apns_sound="critical.aiff",
            )
        return cls()


@dataclass(frozen=True)
class ChannelPayload:
    """Message handed to a channel sender or push gateway."""

    channel: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)
    priority_hint: PriorityHint = field(default_factory=PriorityHint)

    def to_dict(self) -> dict[str, Any]:
        return {
            "notification": {"title": self.title, "body": self.body},
            "data": dict(self.data),
            "priorityHint": {
                "android": self.priority_hint.android_priority,
                "androidNotification": self.priority_hint.android_notification_priority,
                "apnsSound": self.priority_hint.apns_sound,
                "apnsBadge": self.priority_hint.apns_badge,
            },
        }


@dataclass(frozen=True)
class PushReceipt:
    """Acknowledgement returned by a push gateway that accepted a message."""

    message_id: str


__all__ = ["ChannelPayload", "PriorityHint", "PushReceipt"]
