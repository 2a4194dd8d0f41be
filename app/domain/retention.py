"""Retention rules for notifications."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.domain.entities import Notification


@dataclass(frozen=True)
class RetentionPolicy:
    """Decide which notifications the periodic sweep may delete.

    Only notifications that were read and are older than ``days_old`` days
    qualify. Unread notifications are kept regardless of age.
    """

    days_old: int = 30

    def __post_init__(self) -> None:
        if self.days_old < 0:
            raise ValueError("days_old must be zero or positive")

    def with_days(self, days_old: int) -> "RetentionPolicy":
        return replace(self, days_old=days_old)

    def cutoff(self, now: datetime) -> datetime:
        return now - timedelta(days=self.days_old)

    @staticmethod
    def is_purgeable(notification: Notification, cutoff: datetime) -> bool:
        """Return ``True`` when ``notification`` may be deleted for ``cutoff``."""

        if not notification.read or notification.created_at is None:
            return False
        return notification.created_at < cutoff


__all__ = ["RetentionPolicy"]
