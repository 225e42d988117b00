"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    false,
)

from charter_notifications.domain.entities import DELIVERY_STATUS_PENDING, PRIORITY_MEDIUM
from charter_notifications.infrastructure.database import Base
from charter_notifications.utils import now_in_utc_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    category = Column(String(30), nullable=False)
    priority = Column(String(10), nullable=False, default=PRIORITY_MEDIUM)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False, server_default=false())
    delivery_status = Column(
        String(20), nullable=False, default=DELIVERY_STATUS_PENDING, index=True
    )
    gateway_message_id = Column(String(255), nullable=True)
    gateway_error = Column(Text, nullable=True)
    scheduled_for = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_utc_naive_datetime)
    sent_at = Column(DateTime(), nullable=True)
    delivered_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
