from .notification import (
    DeliveryFailureRequest,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
)
from .preferences import (
    DeviceRegistrationRequest,
    NotificationPreferencesRead,
    NotificationPreferencesSchema,
    QuietHoursSchema,
)

__all__ = [
    "DeliveryFailureRequest",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "DeviceRegistrationRequest",
    "NotificationPreferencesRead",
    "NotificationPreferencesSchema",
    "QuietHoursSchema",
]
