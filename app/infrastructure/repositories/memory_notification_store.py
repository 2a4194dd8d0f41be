"""In-process notification store used for local runs and tests."""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationFilters,
    NotificationPage,
    NotificationStats,
)
from app.domain.retention import RetentionPolicy
from app.utils import ensure_app_timezone, now_in_app_timezone


class InMemoryNotificationStore:
    """Keep notifications in a dictionary keyed by id.

    Returned entities are copies, so callers cannot mutate stored rows.
    """

    def __init__(self) -> None:
        self._rows: dict[str, Notification] = {}
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()

    async def insert(self, notification: Notification) -> Notification:
        stored = replace(
            notification,
            id=notification.id or str(uuid.uuid4()),
            category=NotificationCategory(notification.category),
            created_at=ensure_app_timezone(notification.created_at) or now_in_app_timezone(),
            metadata=dict(notification.metadata or {}),
        )
        self._rows[stored.id] = stored
        self._sequence[stored.id] = next(self._counter)
        return replace(stored)

    async def query(self, user_id: str, filters: NotificationFilters) -> NotificationPage:
        matches = [
            row
            for row in self._rows.values()
            if row.user_id == user_id
            and (filters.category is None or row.category == filters.category)
            and (filters.read is None or row.read is filters.read)
        ]
        matches.sort(key=lambda row: (row.created_at, self._sequence[row.id]), reverse=True)
        page = matches[filters.offset : filters.offset + filters.limit]
        return NotificationPage(notifications=[replace(row) for row in page], total=len(matches))

    async def count_unread(self, user_id: str) -> int:
        return sum(1 for row in self._rows.values() if row.user_id == user_id and not row.read)

    async def set_read(
        self,
        user_id: str,
        notification_ids: Iterable[str] | None,
        *,
        read: bool = True,
    ) -> int:
        if notification_ids is None:
            targets = [
                row for row in self._rows.values() if row.user_id == user_id and row.read is not read
            ]
        else:
            wanted = {str(notification_id) for notification_id in notification_ids if notification_id}
            targets = [
                row for row in self._rows.values() if row.user_id == user_id and row.id in wanted
            ]
        for row in targets:
            row.read = read
        return len(targets)

    async def delete(self, user_id: str, notification_id: str) -> bool:
        row = self._rows.get(str(notification_id))
        if row is None or row.user_id != user_id:
            return False
        del self._rows[row.id]
        del self._sequence[row.id]
        return True

    async def stats(self, user_id: str) -> NotificationStats:
        by_category = NotificationStats.empty_histogram()
        total = unread = 0
        for row in self._rows.values():
            if row.user_id != user_id:
                continue
            total += 1
            unread += 0 if row.read else 1
            by_category[row.category] += 1
        return NotificationStats(total=total, unread=unread, by_category=by_category)

    async def delete_read_older_than(self, cutoff: datetime) -> int:
        cutoff = ensure_app_timezone(cutoff)
        expired = [
            row.id for row in self._rows.values() if RetentionPolicy.is_purgeable(row, cutoff)
        ]
        for notification_id in expired:
            del self._rows[notification_id]
            del self._sequence[notification_id]
        return len(expired)


__all__ = ["InMemoryNotificationStore"]
