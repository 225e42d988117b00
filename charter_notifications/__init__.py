"""Notification dispatch core for the yacht-charter marketplace."""

__version__ = "0.1.0"
