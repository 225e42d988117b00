"""Tests for notification persistence and the delivery status state machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import inspect

from charter_notifications.domain.entities import Notification
from charter_notifications.domain.exceptions import InvalidTransitionError, NotFoundError
from charter_notifications.infrastructure.models import NotificationModel, UserModel
from charter_notifications.infrastructure.repositories import NotificationRepository
from charter_notifications.utils import datetime as datetime_utils


@pytest.fixture()
def repository(session, clock):
    return NotificationRepository(session, clock=clock)


@pytest.fixture()
def stored(repository, make_user):
    user = make_user()
    return repository.create(
        Notification(
            id=None,
            user_id=user.id,
            type="booking",
            category="transaction",
            title="Booking confirmed",
            message="Your charter on Aurora is confirmed.",
            metadata={"bookingId": 7},
        )
    )


def test_create_starts_pending_without_lifecycle_timestamps(stored, clock):
    assert stored.id is not None
    assert stored.delivery_status == "pending"
    assert stored.priority == "medium"
    assert stored.read is False
    assert stored.created_at == clock()
    assert stored.sent_at is None
    assert stored.delivered_at is None
    assert stored.gateway_message_id is None
    assert stored.gateway_error is None
    assert stored.metadata == {"bookingId": 7}


def test_create_persists_schedule_fields_untouched(repository, make_user):
    user = make_user()
    scheduled = datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)
    expires = scheduled + timedelta(days=2)

    created = repository.create(
        Notification(
            id=None,
            user_id=user.id,
            type="weather",
            category="safety",
            title="Gale warning",
            message="Strong winds expected.",
            scheduled_for=scheduled,
            expires_at=expires,
        )
    )

    fetched = repository.get(created.id)
    assert fetched.scheduled_for == scheduled
    assert fetched.expires_at == expires


def test_mark_sent_records_message_id_and_time(repository, stored, clock):
    clock.advance(seconds=5)

    sent = repository.mark_sent(stored.id, "m1")

    assert sent.delivery_status == "sent"
    assert sent.gateway_message_id == "m1"
    assert sent.sent_at == clock()


def test_mark_sent_twice_is_rejected_and_keeps_sent_at(repository, stored, clock):
    first = repository.mark_sent(stored.id, "m1")
    clock.advance(minutes=1)

    with pytest.raises(InvalidTransitionError):
        repository.mark_sent(stored.id, "m2")

    current = repository.get(stored.id)
    assert current.sent_at == first.sent_at
    assert current.gateway_message_id == "m1"


def test_delivered_only_after_sent(repository, stored, clock):
    with pytest.raises(InvalidTransitionError):
        repository.mark_delivered(stored.id)

    repository.mark_sent(stored.id, "m1")
    clock.advance(seconds=30)
    delivered = repository.mark_delivered(stored.id)

    assert delivered.delivery_status == "delivered"
    assert delivered.delivered_at == clock()


@pytest.mark.parametrize("sent_first", [False, True])
def test_mark_failed_from_pending_or_sent(repository, stored, sent_first):
    if sent_first:
        repository.mark_sent(stored.id, "m1")

    failed = repository.mark_failed(stored.id, "UNREGISTERED: token expired")

    assert failed.delivery_status == "failed"
    assert failed.gateway_error == "UNREGISTERED: token expired"


def test_no_transition_leaves_a_terminal_state(repository, stored):
    repository.mark_sent(stored.id, "m1")
    repository.mark_delivered(stored.id)

    with pytest.raises(InvalidTransitionError):
        repository.mark_failed(stored.id, "late")
    with pytest.raises(InvalidTransitionError):
        repository.mark_sent(stored.id, "m2")

    current = repository.get(stored.id)
    assert current.delivery_status == "delivered"
    assert current.gateway_error is None


def test_failed_is_terminal(repository, stored):
    repository.mark_failed(stored.id, "boom")

    with pytest.raises(InvalidTransitionError) as excinfo:
        repository.mark_delivered(stored.id)

    assert excinfo.value.current == "failed"
    assert repository.get(stored.id).delivered_at is None


@pytest.mark.parametrize(
    "operation",
    [
        lambda repo: repo.get(999),
        lambda repo: repo.mark_sent(999, "m1"),
        lambda repo: repo.mark_delivered(999),
        lambda repo: repo.mark_failed(999, "boom"),
        lambda repo: repo.mark_read(999),
    ],
)
def test_unknown_id_raises_not_found(repository, operation):
    with pytest.raises(NotFoundError):
        operation(repository)


def test_stale_reader_loses_the_race(session_factory, stored, clock):
    first = NotificationRepository(session_factory(), clock=clock)
    second = NotificationRepository(session_factory(), clock=clock)
    assert second.get(stored.id).delivery_status == "pending"

    first.mark_sent(stored.id, "winner")
    with pytest.raises(InvalidTransitionError):
        second.mark_sent(stored.id, "loser")

    assert second.get(stored.id).gateway_message_id == "winner"


def test_mark_read_does_not_touch_delivery_status(repository, stored):
    updated = repository.mark_read(stored.id)

    assert updated.read is True
    assert updated.delivery_status == "pending"


def test_list_for_user_newest_first_and_unread_filter(repository, make_user, clock):
    user = make_user()
    other = make_user()
    created = []
    for index in range(3):
        created.append(
            repository.create(
                Notification(
                    id=None,
                    user_id=user.id,
                    type="message",
                    category="communication",
                    title=f"Message {index}",
                    message="Ahoy",
                )
            )
        )
        clock.advance(minutes=1)
    repository.create(
        Notification(
            id=None,
            user_id=other.id,
            type="message",
            category="communication",
            title="Not yours",
            message="Ahoy",
        )
    )
    repository.mark_read(created[2].id)

    listed = repository.list_for_user(user.id)
    unread = repository.list_for_user(user.id, unread_only=True)

    assert [n.title for n in listed] == ["Message 2", "Message 1", "Message 0"]
    assert [n.title for n in unread] == ["Message 1", "Message 0"]
    assert len(repository.list_for_user(user.id, limit=1)) == 1


def test_timestamps_keep_order_across_daylight_saving_fall_back(
    repository, stored, clock, session, monkeypatch
):
    athens = ZoneInfo("Europe/Athens")
    monkeypatch.setattr(datetime_utils, "get_app_timezone", lambda: athens)
    clock.value = datetime(2024, 10, 27, 0, 50, tzinfo=timezone.utc)  # 03:50 EEST
    created = repository.create(
        Notification(
            id=None,
            user_id=stored.user_id,
            type="weather",
            category="safety",
            title="Gale warning",
            message="Strong winds expected.",
        )
    )
    clock.value = datetime(2024, 10, 27, 1, 10, tzinfo=timezone.utc)  # 03:10 EET

    sent = repository.mark_sent(created.id, "m1")

    assert sent.sent_at >= sent.created_at
    assert sent.sent_at.tzinfo is not None
    row = session.get(NotificationModel, created.id)
    assert row.created_at == datetime(2024, 10, 27, 0, 50)
    assert row.sent_at == datetime(2024, 10, 27, 1, 10)


@pytest.mark.parametrize("model", [NotificationModel, UserModel])
def test_models_map_plain_columns_only(model):
    assert list(inspect(model).relationships) == []
