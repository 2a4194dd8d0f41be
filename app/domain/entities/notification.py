"""Domain entities describing user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationCategory(str, Enum):
    """Fixed set of categories a notification can belong to."""

    SYSTEM = "system"
    PROCESSING = "processing"
    USAGE = "usage"
    UPDATE = "update"
    TIP = "tip"
    SECURITY = "security"


class NotificationSeverity(str, Enum):
    """Visual severity attached to a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """Information message delivered to a specific user.

    Only ``read`` changes after creation; every other attribute is fixed once
    the store assigns ``id`` and ``created_at``.
    """

    id: str | None
    user_id: str
    title: str
    message: str
    category: NotificationCategory
    severity: NotificationSeverity = NotificationSeverity.INFO
    action_url: str | None = None
    action_button_text: str | None = None
    callback: str | None = None
    read: bool = False
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


# Largest offset accepted by every supported SQL backend.
MAX_OFFSET = 2**31 - 1


@dataclass(frozen=True)
class NotificationFilters:
    """Filters accepted when listing the notifications of a user."""

    category: NotificationCategory | None = None
    read: bool | None = None
    limit: int = 20
    offset: int = 0

    def clamped(self, *, max_limit: int) -> "NotificationFilters":
        """Return a copy whose pagination values fall inside the valid range."""

        limit = min(max(self.limit, 1), max_limit)
        offset = min(max(self.offset, 0), MAX_OFFSET)
        return NotificationFilters(
            category=self.category, read=self.read, limit=limit, offset=offset
        )


@dataclass
class NotificationPage:
    """A page of notifications along with the total number of matches."""

    notifications: list[Notification]
    total: int


@dataclass
class NotificationStats:
    """Aggregated counters for the notifications of a user."""

    total: int
    unread: int
    by_category: dict[NotificationCategory, int]

    @classmethod
    def empty_histogram(cls) -> dict[NotificationCategory, int]:
        return {category: 0 for category in NotificationCategory}


__all__ = [
    "MAX_OFFSET",
    "Notification",
    "NotificationCategory",
    "NotificationFilters",
    "NotificationPage",
    "NotificationSeverity",
    "NotificationStats",
]
