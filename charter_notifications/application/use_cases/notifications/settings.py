"""Use cases for the per-user notification settings."""

from __future__ import annotations

from sqlalchemy.orm import Session

from charter_notifications.domain.entities import NotificationPreferences, User
from charter_notifications.infrastructure.repositories import UserRepository


def get_user_preferences(session: Session, user_id: int) -> NotificationPreferences:
    """Return the preferences applied when notifying ``user_id``."""

    preferences = UserRepository(session).get_preferences(user_id)
    return preferences or NotificationPreferences.fully_enabled()


def update_user_preferences(
    session: Session, user_id: int, preferences: NotificationPreferences
) -> NotificationPreferences:
    return UserRepository(session).update_preferences(user_id, preferences)


def register_device(session: Session, user_id: int, *, token: str) -> User:
    """Store the push registration token reported by the user's device."""

    token = token.strip()
    if not token:
        raise ValueError("Device token is required")
    return UserRepository(session).register_push_token(user_id, token)


__all__ = ["get_user_preferences", "update_user_preferences", "register_device"]
