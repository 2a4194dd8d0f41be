"""Domain entities exposed by the application."""

from .notification import (
    MAX_OFFSET,
    Notification,
    NotificationCategory,
    NotificationFilters,
    NotificationPage,
    NotificationSeverity,
    NotificationStats,
)

__all__ = [
    "MAX_OFFSET",
    "Notification",
    "NotificationCategory",
    "NotificationFilters",
    "NotificationPage",
    "NotificationSeverity",
    "NotificationStats",
]
