"""Local-time window evaluation used for quiet hours."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Final

from charter_notifications.domain.exceptions import ConfigurationError
from charter_notifications.utils import resolve_timezone

_CLOCK_PATTERN: Final[re.Pattern[str]] = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_clock_time(value: str) -> int:
    """Return minutes after midnight for a 24-hour ``HH:MM`` string."""

    match = _CLOCK_PATTERN.match(value or "")
    if not match:
        raise ConfigurationError(f"Invalid time '{value}', expected 24-hour HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def is_within_window(now: datetime, start: str, end: str, tz_name: str) -> bool:
    """Return ``True`` when ``now`` falls inside the ``[start, end]`` local window.

    ``now`` is converted to the wall clock of ``tz_name`` and compared at minute
    resolution; naive values are taken as UTC. When ``start >= end`` the window
    wraps midnight, so ``start == end`` covers the whole day. Both boundaries are
    inclusive.
    """

    start_minute = parse_clock_time(start)
    end_minute = parse_clock_time(end)
    tz = resolve_timezone(tz_name)

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(tz)
    local_minute = local.hour * 60 + local.minute

    if start_minute < end_minute:
        return start_minute <= local_minute <= end_minute
    return local_minute >= start_minute or local_minute <= end_minute


__all__ = ["is_within_window", "parse_clock_time"]
