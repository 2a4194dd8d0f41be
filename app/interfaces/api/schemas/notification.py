"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationCategory, NotificationSeverity


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    category: NotificationCategory
    severity: NotificationSeverity
    action_url: str | None = None
    action_button_text: str | None = None
    callback: str | None = None
    read: bool
    created_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationListRead(BaseModel):
    """A page of notifications and the number of notifications matching the filters."""

    notifications: list[NotificationRead]
    total: int


class UnreadCountRead(BaseModel):
    count: int


class NotificationStatsRead(BaseModel):
    """Totals for the authenticated user, with a histogram per category."""

    total: int
    unread: int
    by_category: dict[NotificationCategory, int]


__all__ = [
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationStatsRead",
    "UnreadCountRead",
]
