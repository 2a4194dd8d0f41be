"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, JSON, String, Text

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    category = Column(String(20), nullable=False, index=True, default="system")
    severity = Column(String(10), nullable=False, default="info")
    action_url = Column(String(500), nullable=True)
    action_button_text = Column(String(100), nullable=True)
    callback = Column(String(255), nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(), nullable=False, index=True, default=now_in_app_naive_datetime
    )
    # ``metadata`` is reserved on declarative classes.
    extra = Column("metadata", JSON, nullable=False, default=dict)


__all__ = ["NotificationModel"]
