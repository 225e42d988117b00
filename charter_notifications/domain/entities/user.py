"""Domain entity representing a notification recipient."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .preferences import NotificationPreferences


@dataclass
class User:
    """Marketplace account that can receive notifications."""

    id: int | None
    name: str
    email: str | None = None
    phone: str | None = None
    push_token: str | None = None
    notification_preferences: NotificationPreferences | None = None
    created_at: datetime | None = None


__all__ = ["User"]
