"""Record notifications and deliver them according to user preferences."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from charter_notifications.config import get_settings
from charter_notifications.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_PUSH,
    CHANNEL_SMS,
    PRIORITIES,
    PRIORITY_MEDIUM,
    Notification,
    PushReceipt,
    category_for_type,
)
from charter_notifications.domain.exceptions import GatewayError, InvalidTransitionError
from charter_notifications.infrastructure.repositories import (
    NotificationRepository,
    UserRepository,
)
from charter_notifications.utils import now_in_app_timezone

from .payloads import build_channel_payload
from .ports import ChannelSender, PushGateway
from .preferences import NotificationCandidate, resolve_preferences

logger = logging.getLogger(__name__)

_gateway_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="push-gateway")


class NotificationDispatcher:
    """Entry point used by booking, payment and maintenance flows to notify users.

    The dispatcher never raises for transport problems: a rejected or timed out
    push leaves the stored notification in ``failed`` with the gateway error
    attached. Database errors are not caught.
    """

    def __init__(
        self,
        session: Session,
        *,
        push_gateway: PushGateway | None = None,
        email_sender: ChannelSender | None = None,
        sms_sender: ChannelSender | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
        gateway_timeout: float | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._notifications = NotificationRepository(session, clock=clock)
        self._users = UserRepository(session)
        self._push_gateway = push_gateway
        self._senders: dict[str, ChannelSender | None] = {
            CHANNEL_EMAIL: email_sender,
            CHANNEL_SMS: sms_sender,
        }
        self._clock = clock
        self._timeout = (
            gateway_timeout
            if gateway_timeout is not None
            else get_settings().push_gateway_timeout_seconds
        )
        self._executor = executor or _gateway_executor

    def send(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        notification_type: str,
        priority: str = PRIORITY_MEDIUM,
        metadata: Mapping[str, Any] | None = None,
        scheduled_for: datetime | None = None,
        expires_at: datetime | None = None,
    ) -> Notification | None:
        """Record a notification for ``user_id`` and push it when allowed.

        Returns ``None`` when the user's preferences disable the notification's
        category; nothing is stored in that case.
        """

        if priority not in PRIORITIES:
            raise ValueError(f"Unknown notification priority '{priority}'")
        category = category_for_type(notification_type)

        preferences = self._users.get_preferences(user_id)
        candidate = NotificationCandidate(
            type=notification_type, category=category, priority=priority
        )
        resolution = resolve_preferences(preferences, candidate, now=self._clock())

        if resolution.record_suppressed:
            logger.info(
                "Skip sending %s notification for user %s: category disabled",
                notification_type,
                user_id,
            )
            return None

        notification = self._notifications.create(
            Notification(
                id=None,
                user_id=user_id,
                type=notification_type,
                category=category,
                title=title,
                message=message,
                priority=priority,
                metadata=dict(metadata or {}),
                scheduled_for=scheduled_for,
                expires_at=expires_at,
            )
        )

        if resolution.delivery_suppressed:
            logger.info(
                "Holding delivery of notification %s for user %s during quiet hours",
                notification.id,
                user_id,
            )
            return notification

        if not resolution.eligible_channels:
            logger.info(
                "Notification %s for user %s has no enabled delivery channel",
                notification.id,
                user_id,
            )
            return notification

        if CHANNEL_PUSH in resolution.eligible_channels:
            notification = self._deliver_push(notification)

        for channel in (CHANNEL_EMAIL, CHANNEL_SMS):
            if channel in resolution.eligible_channels:
                self._deliver_to_channel(notification, channel)
        return notification

    def _deliver_push(self, notification: Notification) -> Notification:
        token = self._users.get_push_token(notification.user_id)
        if not token:
            logger.info(
                "Skip sending push notification for user %s: no device token",
                notification.user_id,
            )
            return notification
        if self._push_gateway is None:
            logger.info("Skip sending push notification %s: no gateway", notification.id)
            return notification

        payload = build_channel_payload(notification, CHANNEL_PUSH)
        try:
            receipt = self._call_gateway(token, payload)
        except GatewayError as exc:
            error = exc.describe()
            logger.warning(
                "Push delivery failed for notification %s: %s", notification.id, error
            )
            return self._settle(
                notification, lambda: self._notifications.mark_failed(notification.id, error)
            )

        return self._settle(
            notification,
            lambda: self._notifications.mark_sent(notification.id, receipt.message_id),
        )

    def _call_gateway(self, token: str, payload: Any) -> PushReceipt:
        future = self._executor.submit(self._push_gateway.send_push, token, payload)
        try:
            receipt = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            raise GatewayError(
                f"Push gateway did not answer within {self._timeout:g}s", code="timeout"
            ) from None
        except GatewayError:
            raise
        except Exception as exc:
            logger.exception("Unexpected push gateway failure")
            raise GatewayError(str(exc) or type(exc).__name__, code="unexpected") from exc

        if receipt is None or not getattr(receipt, "message_id", None):
            raise GatewayError("Push gateway returned no message id", code="empty-receipt")
        return receipt

    def _settle(
        self, notification: Notification, transition: Callable[[], Notification]
    ) -> Notification:
        try:
            return transition()
        except InvalidTransitionError as exc:
            # A delivery callback already moved the record forward.
            logger.warning("%s", exc)
            return self._notifications.get(notification.id)

    def _deliver_to_channel(self, notification: Notification, channel: str) -> None:
        sender = self._senders.get(channel)
        if sender is None:
            logger.debug("No %s sender configured; skipping", channel)
            return

        contact = self._users.get_contact(notification.user_id)
        address = contact.email if channel == CHANNEL_EMAIL else contact.phone
        if not address:
            logger.info(
                "Skip sending %s notification for user %s: no address",
                channel,
                notification.user_id,
            )
            return

        payload = build_channel_payload(notification, channel)
        future = self._executor.submit(sender.send, address, payload)
        try:
            delivered = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                "%s sender did not answer within %gs for notification %s",
                channel,
                self._timeout,
                notification.id,
            )
            return
        except Exception:
            logger.exception("Failed to send %s notification %s", channel, notification.id)
            delivered = False
        if not delivered:
            logger.warning(
                "Notification %s was not delivered by %s", notification.id, channel
            )


__all__ = ["NotificationDispatcher"]
