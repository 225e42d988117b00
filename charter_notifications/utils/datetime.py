"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from charter_notifications.config import get_settings
from charter_notifications.domain.exceptions import ConfigurationError

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable (via
    the ``Settings`` object). If the provided value cannot be resolved, UTC is
    used as a fallback.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    try:
        return resolve_timezone(tz_name)
    except ConfigurationError:
        return ZoneInfo(_DEFAULT_TIMEZONE)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def now_in_utc_naive_datetime() -> datetime:
    """Return the current instant as a naive UTC value for storage."""

    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` as the naive UTC datetime written to ``DateTime`` columns.

    Naive input is read as app-local time.
    """

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Convert a naive UTC value read from the database into the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())


def resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve an IANA name or ``UTC±HH[:MM]`` offset into a ``tzinfo``.

    Raises :class:`ConfigurationError` when ``tz_name`` cannot be resolved.
    """

    name = (tz_name or "").strip()
    if not name:
        raise ConfigurationError("Timezone name must not be empty")

    match = _OFFSET_PATTERN.match(name)
    if match:
        sign = -1 if match.group("sign") == "-" else 1
        hours = int(match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        if hours > 23 or minutes > 59:
            raise ConfigurationError(f"Invalid UTC offset '{tz_name}'")
        return timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConfigurationError(f"Unknown timezone '{tz_name}'") from exc
