"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    from_storage_datetime,
    get_app_timezone,
    now_in_app_timezone,
    now_in_utc_naive_datetime,
    resolve_timezone,
    to_storage_datetime,
)

__all__ = [
    "ensure_app_timezone",
    "from_storage_datetime",
    "get_app_timezone",
    "now_in_app_timezone",
    "now_in_utc_naive_datetime",
    "resolve_timezone",
    "to_storage_datetime",
]
