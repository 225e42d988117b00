"""Shared fixtures for the notification core tests."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")

import threading
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from charter_notifications.domain.entities import NotificationPreferences, PushReceipt, User
from charter_notifications.infrastructure.database import initialize_database
from charter_notifications.infrastructure.repositories import UserRepository


class FixedClock:
    """Clock returning a controllable instant."""

    def __init__(self, value: datetime) -> None:
        self.value = value

    def __call__(self) -> datetime:
        return self.value

    def advance(self, **delta: float) -> None:
        self.value = self.value + timedelta(**delta)


class FakePushGateway:
    """Push gateway double recording every call."""

    def __init__(self, *, message_id: str = "m1", error: Exception | None = None) -> None:
        self.message_id = message_id
        self.error = error
        self.calls: list[tuple[str, object]] = []
        self.release: threading.Event | None = None

    def send_push(self, token, payload):
        self.calls.append((token, payload))
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return PushReceipt(message_id=self.message_id)


class RecordingSender:
    """Email/SMS sender double."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.sent: list[tuple[str, object]] = []
        self.release: threading.Event | None = None

    def send(self, address, payload) -> bool:
        self.sent.append((address, payload))
        if self.release is not None:
            self.release.wait(timeout=5)
        return self.result


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def gateway() -> FakePushGateway:
    return FakePushGateway()


@pytest.fixture()
def make_user(session):
    """Persist a user; ``preferences`` may be a dict in the stored JSON shape."""

    counter = {"value": 0}

    def _make(
        *,
        preferences: dict | NotificationPreferences | None = None,
        push_token: str | None = "device-token",
        email: str | None = None,
        phone: str | None = None,
    ) -> User:
        counter["value"] += 1
        if isinstance(preferences, dict):
            preferences = NotificationPreferences.from_dict(preferences)
        return UserRepository(session).create(
            User(
                id=None,
                name=f"Sailor {counter['value']}",
                email=email,
                phone=phone,
                push_token=push_token,
                notification_preferences=preferences,
            )
        )

    return _make


@pytest.fixture()
def make_gateway():
    return FakePushGateway


@pytest.fixture()
def make_sender():
    return RecordingSender
