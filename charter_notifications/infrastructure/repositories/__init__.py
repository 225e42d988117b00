"""Repository implementations for infrastructure layer."""

from .user_repository import ContactDetails, UserRepository
from .notification_repository import NotificationRepository

__all__ = [
    "ContactDetails",
    "UserRepository",
    "NotificationRepository",
]
