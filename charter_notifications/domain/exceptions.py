"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationError(RuntimeError):
    """Base class for notification core failures."""


class ConfigurationError(NotificationError, ValueError):
    """Raised when stored preferences contain malformed quiet hours or timezones."""


class NotFoundError(NotificationError, LookupError):
    """Raised when a notification or user referenced by id does not exist."""

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(NotificationError):
    """Raised when a delivery status change is not allowed from the current state."""

    def __init__(self, notification_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Notification {notification_id} cannot move from '{current}' to '{target}'"
        )
        self.notification_id = notification_id
        self.current = current
        self.target = target


class GatewayError(NotificationError):
    """Raised by push gateways on timeouts, rejections or invalid tokens."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code

    def describe(self) -> str:
        """Return the text stored on the notification record."""

        if self.code:
            return f"{self.code}: {self}"
        return str(self)


__all__ = [
    "NotificationError",
    "ConfigurationError",
    "NotFoundError",
    "InvalidTransitionError",
    "GatewayError",
]
