"""Pydantic models for notification preferences and device registration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from charter_notifications.domain.entities import NotificationPreferences, QuietHours
from charter_notifications.utils import resolve_timezone

_CLOCK_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"

ChannelLiteral = Literal["push", "email", "sms"]


class QuietHoursSchema(BaseModel):
    enabled: bool = False
    start: str = Field(default="22:00", pattern=_CLOCK_PATTERN)
    end: str = Field(default="07:00", pattern=_CLOCK_PATTERN)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value.strip()


class NotificationPreferencesSchema(BaseModel):
    """Preferences accepted from and returned to the client."""

    push_enabled: bool = True
    email_enabled: bool = True
    sms_enabled: bool = True
    categories_enabled: dict[str, bool] = Field(default_factory=dict)
    frequency: Literal["instant", "daily", "weekly"] = "instant"
    quiet_hours: QuietHoursSchema = Field(default_factory=QuietHoursSchema)
    channel_category_allowlist: dict[ChannelLiteral, list[str]] = Field(
        default_factory=dict
    )
    allow_all_categories: bool = False

    def to_entity(self) -> NotificationPreferences:
        """Convert into the domain object, filling omitted keys with defaults."""

        return NotificationPreferences.from_dict(self.model_dump())


class NotificationPreferencesRead(NotificationPreferencesSchema):
    """Effective preferences, including the fallback used when none are stored."""

    @classmethod
    def from_entity(
        cls, preferences: NotificationPreferences
    ) -> "NotificationPreferencesRead":
        quiet: QuietHours = preferences.quiet_hours
        return cls(
            push_enabled=preferences.push_enabled,
            email_enabled=preferences.email_enabled,
            sms_enabled=preferences.sms_enabled,
            categories_enabled=dict(preferences.categories_enabled),
            frequency=preferences.frequency,
            quiet_hours=QuietHoursSchema.model_construct(
                enabled=quiet.enabled,
                start=quiet.start,
                end=quiet.end,
                timezone=quiet.timezone,
            ),
            channel_category_allowlist={
                channel: sorted(keys)
                for channel, keys in preferences.channel_category_allowlist.items()
            },
            allow_all_categories=preferences.allow_all_categories,
        )


class DeviceRegistrationRequest(BaseModel):
    """Push registration token reported by a user's device."""

    token: str = Field(..., min_length=1, max_length=512)


__all__ = [
    "DeviceRegistrationRequest",
    "NotificationPreferencesRead",
    "NotificationPreferencesSchema",
    "QuietHoursSchema",
]
