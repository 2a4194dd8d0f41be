"""Protocol definitions for the collaborators of the notification service.

The service depends on these contracts instead of concrete classes:

* :class:`NotificationStore` persists notifications. Every operation except
  :meth:`NotificationStore.delete_read_older_than` is scoped by user id.
* :class:`IdentityVerifier` turns a bearer credential into a user id.
* :class:`NotificationPusher` is the only capability the realtime gateway
  exposes to the service: look up a user's open handles and emit frames.
* :class:`AuditSink` receives a record for every state change.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from app.domain.entities import (
    Notification,
    NotificationFilters,
    NotificationPage,
    NotificationStats,
)


@runtime_checkable
class NotificationStore(Protocol):
    """Durable storage for notifications.

    Implementations raise
    :class:`~app.domain.exceptions.NotificationPersistenceError` when the
    backend fails.
    """

    async def insert(self, notification: Notification) -> Notification: ...

    async def query(
        self, user_id: str, filters: NotificationFilters
    ) -> NotificationPage: ...

    async def count_unread(self, user_id: str) -> int: ...

    async def set_read(
        self,
        user_id: str,
        notification_ids: Iterable[str] | None,
        *,
        read: bool = True,
    ) -> int:
        """Update the read flag of ``notification_ids`` (all rows when ``None``).

        Returns the number of matching rows of ``user_id``.
        """
        ...

    async def delete(self, user_id: str, notification_id: str) -> bool: ...

    async def stats(self, user_id: str) -> NotificationStats: ...

    async def delete_read_older_than(self, cutoff: datetime) -> int: ...


@runtime_checkable
class IdentityVerifier(Protocol):
    """Validate a bearer credential and return the stable user id."""

    async def verify(self, credential: str) -> str: ...


@runtime_checkable
class NotificationPusher(Protocol):
    """Push frames to the open realtime connections of a user."""

    def connections_for(self, user_id: str) -> Collection[Any]: ...

    async def emit(self, handle: Any, event: str, payload: Any) -> bool: ...

    async def broadcast(self, event: str, payload: Any) -> int: ...


@runtime_checkable
class AuditSink(Protocol):
    """Receive audit records emitted by the notification service."""

    def record(self, action: str, user_id: str | None, **details: Any) -> None: ...


__all__ = ["AuditSink", "IdentityVerifier", "NotificationPusher", "NotificationStore"]
