"""End-to-end tests for recording and dispatching notifications."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

import pytest

from charter_notifications.application.use_cases.notifications import NotificationDispatcher
from charter_notifications.domain.exceptions import GatewayError, NotFoundError
from charter_notifications.infrastructure.repositories import NotificationRepository

PUSH_ONLY_BOOKING = {
    "push_enabled": True,
    "email_enabled": False,
    "sms_enabled": False,
    "categories_enabled": {"booking": True},
    "channel_category_allowlist": {"push": ["booking"]},
    "quiet_hours": {"enabled": False},
}

NIGHT_QUIET_HOURS = {
    **PUSH_ONLY_BOOKING,
    "quiet_hours": {"enabled": True, "start": "22:00", "end": "07:00", "timezone": "UTC"},
}


@pytest.fixture()
def dispatcher_factory(session, clock, gateway):
    def _build(**kwargs) -> NotificationDispatcher:
        kwargs.setdefault("push_gateway", gateway)
        kwargs.setdefault("gateway_timeout", 2.0)
        return NotificationDispatcher(session, clock=clock, **kwargs)

    return _build


def _send(dispatcher: NotificationDispatcher, user_id: int, **overrides):
    params = {
        "user_id": user_id,
        "title": "Booking confirmed",
        "message": "Your charter on Aurora is confirmed for Saturday.",
        "notification_type": "booking",
    }
    params.update(overrides)
    return dispatcher.send(**params)


def test_booking_is_recorded_and_pushed(dispatcher_factory, make_user, gateway, clock):
    user = make_user(preferences=PUSH_ONLY_BOOKING)

    notification = _send(dispatcher_factory(), user.id, metadata={"bookingId": 42})

    assert notification.delivery_status == "sent"
    assert notification.gateway_message_id == "m1"
    assert notification.sent_at == clock()
    assert notification.category == "transaction"
    token, payload = gateway.calls[0]
    assert token == "device-token"
    assert payload.channel == "push"
    assert payload.title == "Booking confirmed"
    assert payload.data == {
        "bookingId": "42",
        "notificationId": str(notification.id),
        "type": "booking",
    }
    assert payload.priority_hint.android_priority == "normal"


def test_quiet_hours_keep_record_pending_without_gateway_call(
    dispatcher_factory, make_user, gateway, clock, session
):
    clock.value = datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc)
    user = make_user(preferences=NIGHT_QUIET_HOURS)

    notification = _send(dispatcher_factory(), user.id)

    assert notification is not None
    assert notification.delivery_status == "pending"
    assert gateway.calls == []
    stored = NotificationRepository(session).get(notification.id)
    assert stored.delivery_status == "pending"
    assert stored.sent_at is None


def test_urgent_notification_is_pushed_during_quiet_hours(
    dispatcher_factory, make_user, gateway, clock
):
    clock.value = datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc)
    user = make_user(preferences=NIGHT_QUIET_HOURS)

    notification = _send(dispatcher_factory(), user.id, priority="urgent")

    assert notification.delivery_status == "sent"
    assert len(gateway.calls) == 1
    hint = gateway.calls[0][1].priority_hint
    assert hint.android_priority == "high"
    assert hint.android_notification_priority == "max"
    assert hint.apns_sound == "critical.aiff"


def test_urgent_notification_records_gateway_failure(
    dispatcher_factory, make_user, make_gateway, clock
):
    clock.value = datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc)
    user = make_user(preferences=NIGHT_QUIET_HOURS)
    failing = make_gateway(error=GatewayError("token not registered", code="UNREGISTERED"))

    notification = _send(dispatcher_factory(push_gateway=failing), user.id, priority="urgent")

    assert notification.delivery_status == "failed"
    assert notification.gateway_error == "UNREGISTERED: token not registered"
    assert notification.sent_at is None


def test_disabled_category_returns_none_and_stores_nothing(
    dispatcher_factory, make_user, gateway, session
):
    user = make_user(preferences={"categories_enabled": {"marketing": False}})

    result = _send(
        dispatcher_factory(),
        user.id,
        notification_type="promotion",
        title="Summer offer",
        message="20% off sunset cruises",
        priority="urgent",
    )

    assert result is None
    assert gateway.calls == []
    assert NotificationRepository(session).list_for_user(user.id) == []


def test_missing_push_token_leaves_record_pending(dispatcher_factory, make_user, gateway):
    user = make_user(preferences=PUSH_ONLY_BOOKING, push_token=None)

    notification = _send(dispatcher_factory(), user.id)

    assert notification.delivery_status == "pending"
    assert gateway.calls == []


def test_no_eligible_channel_leaves_record_pending(dispatcher_factory, make_user, gateway):
    user = make_user(preferences={**PUSH_ONLY_BOOKING, "push_enabled": False})

    notification = _send(dispatcher_factory(), user.id)

    assert notification.delivery_status == "pending"
    assert gateway.calls == []


def test_user_without_preferences_receives_everything(dispatcher_factory, make_user, gateway):
    user = make_user(preferences=None)

    notification = _send(
        dispatcher_factory(), user.id, notification_type="message", priority="low"
    )

    assert notification.delivery_status == "sent"
    assert notification.category == "communication"
    assert len(gateway.calls) == 1


def test_invalid_quiet_hours_do_not_block_delivery(dispatcher_factory, make_user, gateway, clock):
    clock.value = datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc)
    user = make_user(
        preferences={
            **PUSH_ONLY_BOOKING,
            "quiet_hours": {"enabled": True, "start": "25:00", "end": "07:00"},
        }
    )

    notification = _send(dispatcher_factory(), user.id)

    assert notification.delivery_status == "sent"


def test_gateway_timeout_is_recorded_as_failure(dispatcher_factory, make_user, make_gateway):
    user = make_user(preferences=PUSH_ONLY_BOOKING)
    slow = make_gateway()
    slow.release = threading.Event()

    try:
        notification = _send(
            dispatcher_factory(push_gateway=slow, gateway_timeout=0.05), user.id
        )
    finally:
        slow.release.set()

    assert notification.delivery_status == "failed"
    assert notification.gateway_error.startswith("timeout:")


def test_unexpected_gateway_exception_is_not_raised(
    dispatcher_factory, make_user, make_gateway
):
    user = make_user(preferences=PUSH_ONLY_BOOKING)
    broken = make_gateway(error=RuntimeError("connection reset"))

    notification = _send(dispatcher_factory(push_gateway=broken), user.id)

    assert notification.delivery_status == "failed"
    assert notification.gateway_error == "unexpected: connection reset"


def test_email_channel_uses_sender_without_touching_push_status(
    dispatcher_factory, make_user, make_sender
):
    user = make_user(
        preferences={
            **PUSH_ONLY_BOOKING,
            "email_enabled": True,
            "channel_category_allowlist": {"push": ["booking"], "email": ["booking"]},
        },
        email="captain@example.com",
    )
    email_sender = make_sender(result=False)

    notification = _send(dispatcher_factory(email_sender=email_sender), user.id)

    address, payload = email_sender.sent[0]
    assert address == "captain@example.com"
    assert payload.channel == "email"
    assert payload.data["notificationId"] == str(notification.id)
    assert notification.delivery_status == "sent"


def test_metadata_cannot_override_reserved_data_keys(dispatcher_factory, make_user, gateway):
    user = make_user(preferences=PUSH_ONLY_BOOKING)

    notification = _send(
        dispatcher_factory(),
        user.id,
        metadata={"type": "spoofed", "yacht": {"name": "Aurora"}},
    )

    data = gateway.calls[0][1].data
    assert data["type"] == "booking"
    assert data["notificationId"] == str(notification.id)
    assert data["yacht"] == '{"name": "Aurora"}'


def test_record_is_not_backdated(dispatcher_factory, make_user, clock):
    user = make_user(preferences=PUSH_ONLY_BOOKING)

    notification = _send(dispatcher_factory(), user.id)

    assert notification.created_at == clock()
    assert notification.sent_at >= notification.created_at


@pytest.mark.parametrize(
    "overrides",
    [{"notification_type": "newsletter"}, {"priority": "critical"}],
)
def test_unknown_type_or_priority_is_rejected(dispatcher_factory, make_user, overrides):
    user = make_user()

    with pytest.raises(ValueError):
        _send(dispatcher_factory(), user.id, **overrides)


def test_unknown_user_is_reported(dispatcher_factory):
    with pytest.raises(NotFoundError):
        _send(dispatcher_factory(), 12345)


def test_slow_email_sender_does_not_hold_back_push(
    dispatcher_factory, make_user, make_sender, gateway
):
    user = make_user(
        preferences={
            **PUSH_ONLY_BOOKING,
            "email_enabled": True,
            "channel_category_allowlist": {"push": ["booking"], "email": ["booking"]},
        },
        email="captain@example.com",
    )
    email_sender = make_sender()
    email_sender.release = threading.Event()

    started = time.monotonic()
    try:
        notification = _send(
            dispatcher_factory(email_sender=email_sender, gateway_timeout=0.05), user.id
        )
        elapsed = time.monotonic() - started
    finally:
        email_sender.release.set()

    assert elapsed < 1.0
    assert notification.delivery_status == "sent"
    assert len(gateway.calls) == 1
