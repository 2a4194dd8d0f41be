"""Repository implementations for infrastructure layer."""

from .memory_notification_store import InMemoryNotificationStore
from .notification_repository import NotificationRepository, SqlAlchemyNotificationStore

__all__ = [
    "InMemoryNotificationStore",
    "NotificationRepository",
    "SqlAlchemyNotificationStore",
]
