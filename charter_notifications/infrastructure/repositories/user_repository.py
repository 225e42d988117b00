"""Persistence layer for notification recipients and their preferences."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from charter_notifications.domain.entities import NotificationPreferences, User
from charter_notifications.domain.exceptions import NotFoundError
from charter_notifications.infrastructure.models import UserModel
from charter_notifications.utils import from_storage_datetime, now_in_utc_naive_datetime


@dataclass(frozen=True)
class ContactDetails:
    """Addresses used by the email and SMS channels."""

    email: str | None
    phone: str | None


class UserRepository:
    """Read and update the notification settings stored on user rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email,
            phone=user.phone,
            push_token=user.push_token,
            notification_preferences=(
                user.notification_preferences.to_dict()
                if user.notification_preferences is not None
                else None
            ),
            created_at=now_in_utc_naive_datetime(),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_preferences(self, user_id: int) -> NotificationPreferences | None:
        """Return the stored preferences, or ``None`` when the user never saved any."""

        model = self._require(user_id)
        if model.notification_preferences is None:
            return None
        return NotificationPreferences.from_dict(model.notification_preferences)

    def get_push_token(self, user_id: int) -> str | None:
        model = self._require(user_id)
        return model.push_token or None

    def get_contact(self, user_id: int) -> ContactDetails:
        model = self._require(user_id)
        return ContactDetails(email=model.email, phone=model.phone)

    def update_preferences(
        self, user_id: int, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        model = self._require(user_id)
        model.notification_preferences = preferences.to_dict()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return NotificationPreferences.from_dict(model.notification_preferences)

    def register_push_token(self, user_id: int, token: str) -> User:
        model = self._require(user_id)
        model.push_token = token
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _require(self, user_id: int) -> UserModel:
        model = self.session.get(UserModel, user_id)
        if model is None:
            raise NotFoundError("User", user_id)
        return model

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        preferences = (
            NotificationPreferences.from_dict(model.notification_preferences)
            if model.notification_preferences is not None
            else None
        )
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            push_token=model.push_token,
            notification_preferences=preferences,
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["ContactDetails", "UserRepository"]
