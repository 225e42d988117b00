"""Decide whether a notification is recorded and on which channels it is delivered."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from charter_notifications.domain.entities import (
    CHANNELS,
    PRIORITY_URGENT,
    NotificationPreferences,
)
from charter_notifications.domain.exceptions import ConfigurationError

from .quiet_hours import is_within_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationCandidate:
    """The attributes of a notification that preferences are matched against."""

    type: str
    category: str
    priority: str

    @property
    def preference_keys(self) -> frozenset[str]:
        """Keys looked up in category switches and channel allowlists."""

        return frozenset({self.type, self.category})


@dataclass(frozen=True)
class PreferenceResolution:
    """Outcome of matching a candidate against a user's preferences.

    ``record_suppressed`` means nothing is stored. ``delivery_suppressed`` means
    the record may be stored but no transport is invoked.
    """

    record_suppressed: bool
    delivery_suppressed: bool
    eligible_channels: frozenset[str] = field(default_factory=frozenset)
    quiet_hours_active: bool = False
    configuration_error: ConfigurationError | None = None


def resolve_preferences(
    preferences: NotificationPreferences | None,
    candidate: NotificationCandidate,
    *,
    now: datetime,
) -> PreferenceResolution:
    """Apply category gating, channel allowlists and quiet hours to ``candidate``."""

    if preferences is None:
        preferences = NotificationPreferences.fully_enabled()

    keys = candidate.preference_keys
    if preferences.category_disabled(keys):
        return PreferenceResolution(record_suppressed=True, delivery_suppressed=True)

    eligible = frozenset(
        channel
        for channel in CHANNELS
        if preferences.channel_enabled(channel)
        and preferences.channel_allows(channel, keys)
    )

    quiet_hours = preferences.quiet_hours
    quiet_active = False
    configuration_error: ConfigurationError | None = None
    if quiet_hours.enabled:
        try:
            quiet_active = is_within_window(
                now, quiet_hours.start, quiet_hours.end, quiet_hours.timezone
            )
        except ConfigurationError as exc:
            logger.warning("Ignoring invalid quiet hours configuration: %s", exc)
            configuration_error = exc

    if quiet_active and candidate.priority != PRIORITY_URGENT:
        return PreferenceResolution(
            record_suppressed=False,
            delivery_suppressed=True,
            quiet_hours_active=True,
        )

    return PreferenceResolution(
        record_suppressed=False,
        delivery_suppressed=False,
        eligible_channels=eligible,
        quiet_hours_active=quiet_active,
        configuration_error=configuration_error,
    )


__all__ = ["NotificationCandidate", "PreferenceResolution", "resolve_preferences"]
