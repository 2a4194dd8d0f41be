"""Aggregate application use cases."""

from .notifications import NotificationCleanupTask, NotificationService

__all__ = ["NotificationCleanupTask", "NotificationService"]
