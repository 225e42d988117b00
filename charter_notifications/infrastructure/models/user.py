"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, DateTime, Integer, JSON, String

from charter_notifications.infrastructure.database import Base
from charter_notifications.utils import now_in_utc_naive_datetime


class UserModel(Base):
    """Marketplace account together with its notification settings."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(32), nullable=True)
    push_token = Column(String(512), nullable=True)
    notification_preferences = Column(JSON, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_utc_naive_datetime)


__all__ = ["UserModel"]
