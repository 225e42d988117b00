"""Firebase Cloud Messaging implementation of the push gateway."""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from charter_notifications.config import Settings
from charter_notifications.domain.entities import ChannelPayload, PushReceipt
from charter_notifications.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "charter-notifications"
ANDROID_ICON = "@drawable/ic_notification"
ANDROID_COLOR = "#2196F3"
_TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_fcm_message(token: str, payload: ChannelPayload) -> messaging.Message:
    """Translate a channel payload into an FCM message addressed to ``token``."""

    hint = payload.priority_hint
    return messaging.Message(
        notification=messaging.Notification(title=payload.title, body=payload.body),
        data=dict(payload.data),
        android=messaging.AndroidConfig(
            priority=hint.android_priority,
            notification=messaging.AndroidNotification(
                channel_id=payload.data.get("type"),
                icon=ANDROID_ICON,
                color=ANDROID_COLOR,
                priority=hint.android_notification_priority,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=payload.title, body=payload.body),
                    sound=hint.apns_sound,
                    badge=hint.apns_badge,
                )
            )
        ),
        token=token,
    )


class FirebasePushGateway:
    """Send push notifications through a dedicated ``firebase_admin`` app."""

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebasePushGateway":
        """Initialise (or reuse) the Firebase app described by ``settings``."""

        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            private_key = (settings.firebase_private_key or "").replace("\\n", "\n")
            certificate = credentials.Certificate(
                {
                    "type": "service_account",
                    "project_id": settings.firebase_project_id,
                    "client_email": settings.firebase_client_email,
                    "private_key": private_key,
                    "token_uri": _TOKEN_URI,
                }
            )
            app = firebase_admin.initialize_app(
                certificate,
                options={
                    "projectId": settings.firebase_project_id,
                    "httpTimeout": settings.push_gateway_timeout_seconds,
                },
                name=FIREBASE_APP_NAME,
            )
            logger.info(
                "Initialised Firebase messaging for project %s",
                settings.firebase_project_id,
            )
        return cls(app)

    def send_push(self, token: str, payload: ChannelPayload) -> PushReceipt:
        message = build_fcm_message(token, payload)
        try:
            message_id = messaging.send(message, app=self._app)
        except FirebaseError as exc:
            raise GatewayError(str(exc), code=getattr(exc, "code", None)) from exc
        except ValueError as exc:
            raise GatewayError(f"Rejected push message: {exc}", code="invalid-argument") from exc
        return PushReceipt(message_id=message_id)


def build_push_gateway(settings: Settings) -> FirebasePushGateway | None:
    """Return the configured push gateway, or ``None`` when FCM is not configured."""

    if not settings.push_enabled:
        logger.info("Firebase credentials not configured; push delivery disabled")
        return None
    return FirebasePushGateway.from_settings(settings)


__all__ = [
    "FirebasePushGateway",
    "build_fcm_message",
    "build_push_gateway",
]
