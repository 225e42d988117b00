"""Domain entities describing a user's notification preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

CHANNEL_PUSH = "push"
CHANNEL_EMAIL = "email"
CHANNEL_SMS = "sms"
CHANNELS: tuple[str, ...] = (CHANNEL_PUSH, CHANNEL_EMAIL, CHANNEL_SMS)

FREQUENCY_INSTANT = "instant"
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCIES: tuple[str, ...] = (FREQUENCY_INSTANT, FREQUENCY_DAILY, FREQUENCY_WEEKLY)

PREFERENCE_KEYS: tuple[str, ...] = (
    "booking",
    "payment",
    "maintenance",
    "weather",
    "system",
    "marketing",
    "service_update",
    "emergency",
)

DEFAULT_CHANNEL_ALLOWLIST: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        CHANNEL_EMAIL: frozenset({"booking", "payment", "emergency"}),
        CHANNEL_SMS: frozenset({"emergency"}),
        CHANNEL_PUSH: frozenset(
            {"booking", "payment", "maintenance", "weather", "emergency"}
        ),
    }
)


def _default_categories() -> Mapping[str, bool]:
    return MappingProxyType({key: True for key in PREFERENCE_KEYS})


def _default_allowlist() -> Mapping[str, frozenset[str]]:
    return DEFAULT_CHANNEL_ALLOWLIST


@dataclass(frozen=True)
class QuietHours:
    """Local-time window during which non-urgent delivery is held back."""

    enabled: bool = False
    start: str = "22:00"
    end: str = "07:00"
    timezone: str = "UTC"


@dataclass(frozen=True)
class NotificationPreferences:
    """Per-user channel, category and quiet-hours configuration.

    Instances are built once at load time through :meth:`from_dict`, which
    fills every missing field with its default, so consumers never need to
    guard against absent keys.
    """

    push_enabled: bool = True
    email_enabled: bool = True
    sms_enabled: bool = True
    categories_enabled: Mapping[str, bool] = field(default_factory=_default_categories)
    frequency: str = FREQUENCY_INSTANT
    quiet_hours: QuietHours = field(default_factory=QuietHours)
    channel_category_allowlist: Mapping[str, frozenset[str]] = field(
        default_factory=_default_allowlist
    )
    allow_all_categories: bool = False

    @classmethod
    def fully_enabled(cls) -> "NotificationPreferences":
        """Preferences used for users who never stored any."""

        return cls(allow_all_categories=True)

    def channel_enabled(self, channel: str) -> bool:
        return {
            CHANNEL_PUSH: self.push_enabled,
            CHANNEL_EMAIL: self.email_enabled,
            CHANNEL_SMS: self.sms_enabled,
        }.get(channel, False)

    def channel_allows(self, channel: str, keys: frozenset[str]) -> bool:
        if self.allow_all_categories:
            return True
        allowed = self.channel_category_allowlist.get(channel, frozenset())
        return not allowed.isdisjoint(keys)

    def category_disabled(self, keys: frozenset[str]) -> bool:
        return any(self.categories_enabled.get(key, True) is False for key in keys)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "NotificationPreferences":
        """Build preferences from a stored JSON document applying defaults."""

        data = data or {}
        categories = {key: True for key in PREFERENCE_KEYS}
        for key, value in (data.get("categories_enabled") or {}).items():
            categories[str(key)] = bool(value)

        allowlist = dict(DEFAULT_CHANNEL_ALLOWLIST)
        for channel, keys in (data.get("channel_category_allowlist") or {}).items():
            if channel in CHANNELS and keys is not None:
                allowlist[channel] = frozenset(str(key) for key in keys)

        quiet = data.get("quiet_hours") or {}
        defaults = QuietHours()
        quiet_hours = QuietHours(
            enabled=bool(quiet.get("enabled", defaults.enabled)),
            start=str(quiet.get("start") or defaults.start),
            end=str(quiet.get("end") or defaults.end),
            timezone=str(quiet.get("timezone") or defaults.timezone),
        )

        return cls(
            push_enabled=bool(data.get("push_enabled", True)),
            email_enabled=bool(data.get("email_enabled", True)),
            sms_enabled=bool(data.get("sms_enabled", True)),
            categories_enabled=MappingProxyType(categories),
            frequency=str(data.get("frequency") or FREQUENCY_INSTANT),
            quiet_hours=quiet_hours,
            channel_category_allowlist=MappingProxyType(allowlist),
            allow_all_categories=bool(data.get("allow_all_categories", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON document stored on the user row."""

        return {
            "push_enabled": self.push_enabled,
            "email_enabled": self.email_enabled,
            "sms_enabled": self.sms_enabled,
            "categories_enabled": dict(self.categories_enabled),
            "frequency": self.frequency,
            "quiet_hours": {
                "enabled": self.quiet_hours.enabled,
                "start": self.quiet_hours.start,
                "end": self.quiet_hours.end,
                "timezone": self.quiet_hours.timezone,
            },
            "channel_category_allowlist": {
                channel: sorted(keys)
                for channel, keys in self.channel_category_allowlist.items()
            },
            "allow_all_categories": self.allow_all_categories,
        }


__all__ = [
    "NotificationPreferences",
    "QuietHours",
    "CHANNELS",
    "CHANNEL_PUSH",
    "CHANNEL_EMAIL",
    "CHANNEL_SMS",
    "FREQUENCIES",
    "FREQUENCY_INSTANT",
    "FREQUENCY_DAILY",
    "FREQUENCY_WEEKLY",
    "PREFERENCE_KEYS",
    "DEFAULT_CHANNEL_ALLOWLIST",
]
