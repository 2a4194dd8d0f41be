"""Delivery orchestrator for user notifications.

:class:`NotificationService` is the only writer of notification state and the
only component that decides whether a push happens. It persists first and
pushes second: a notification the store did not accept is never shown to a
client. Pushes go through the :class:`~app.domain.ports.NotificationPusher`
port that the realtime gateway attaches at start-up.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import Any

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationFilters,
    NotificationPage,
    NotificationSeverity,
    NotificationStats,
)
from app.domain.exceptions import NotificationPersistenceError
from app.domain.ports import AuditSink, NotificationPusher, NotificationStore
from app.domain.retention import RetentionPolicy
from app.infrastructure.audit import LoggingAuditSink
from app.infrastructure.notifications.protocol import (
    NEW_NOTIFICATION,
    SYSTEM_NOTIFICATION,
    UNREAD_COUNT,
    serialize_notification,
)
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationService:
    """Persist notifications, mutate read state and trigger realtime pushes."""

    def __init__(
        self,
        store: NotificationStore,
        *,
        audit: AuditSink | None = None,
        retention: RetentionPolicy | None = None,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self._store = store
        self._audit = audit or LoggingAuditSink()
        self._retention = retention or RetentionPolicy()
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._pusher: NotificationPusher | None = None

    @property
    def store(self) -> NotificationStore:
        return self._store

    def attach_pusher(self, pusher: NotificationPusher) -> None:
        """Register the realtime channel used to reach connected clients."""

        self._pusher = pusher

    def detach_pusher(self) -> None:
        self._pusher = None

    # Sending

    async def send(
        self,
        user_id: str,
        title: str,
        message: str,
        category: NotificationCategory | str,
        metadata: dict[str, Any] | None = None,
        severity: NotificationSeverity | str | None = None,
        action_url: str | None = None,
        action_button_text: str | None = None,
        callback: str | None = None,
    ) -> Notification:
        """Persist a notification for ``user_id`` and push it to open connections.

        Raises :class:`NotificationPersistenceError` when the store rejects the
        notification; nothing is pushed in that case. A user without open
        connections still gets the stored notification on the next connect.
        """

        category = NotificationCategory(category)
        notification = Notification(
            id=None,
            user_id=user_id,
            title=title,
            message=message,
            category=category,
            severity=NotificationSeverity(severity or NotificationSeverity.INFO),
            action_url=action_url,
            action_button_text=action_button_text,
            callback=callback,
            read=False,
            created_at=now_in_app_timezone(),
            metadata=dict(metadata or {}),
        )
        logger.info("Sending %s notification to user %s: %s", category.value, user_id, title)

        try:
            saved = await self._store.insert(notification)
        except NotificationPersistenceError:
            logger.error("Notification for user %s was not stored; no push attempted", user_id)
            self._audit.record("notification.send_failed", user_id, category=category.value)
            raise

        self._audit.record(
            "notification.sent", user_id, notification_id=saved.id, category=category.value
        )
        await self._push_new_notification(saved)
        return saved

    async def _push_new_notification(self, notification: Notification) -> int:
        pusher = self._pusher
        if pusher is None:
            return 0
        handles = list(pusher.connections_for(notification.user_id))
        if not handles:
            logger.debug("User %s not connected, skipping realtime push", notification.user_id)
            return 0

        payload = serialize_notification(notification)
        for handle in handles:
            await pusher.emit(handle, NEW_NOTIFICATION, payload)

        # The count always follows the notification body on every handle.
        await self._push_count(notification.user_id, handles)
        logger.info(
            "Sent notification %s to user %s (%d connections)",
            notification.id,
            notification.user_id,
            len(handles),
        )
        return len(handles)

    async def publish_unread_count(self, user_id: str) -> int | None:
        """Recompute the unread count and push it to every connection of ``user_id``.

        Returns the pushed value, or ``None`` when nothing was pushed.
        """

        pusher = self._pusher
        if pusher is None:
            return None
        handles = list(pusher.connections_for(user_id))
        if not handles:
            return None
        return await self._push_count(user_id, handles)

    async def _push_count(self, user_id: str, handles: Collection[Any]) -> int | None:
        pusher = self._pusher
        if pusher is None:
            return None
        try:
            count = await self._store.count_unread(user_id)
        except NotificationPersistenceError:
            logger.warning("Could not recompute unread count for user %s", user_id)
            return None
        for handle in handles:
            await pusher.emit(handle, UNREAD_COUNT, {"count": count})
        return count

    async def broadcast_system_notification(
        self,
        title: str,
        message: str,
        *,
        severity: NotificationSeverity | str = NotificationSeverity.INFO,
        metadata: dict[str, Any] | None = None,
    ) -> int:
        """Send a non persisted announcement to every open connection."""

        pusher = self._pusher
        if pusher is None:
            return 0
        payload = {
            "title": title,
            "message": message,
            "type": NotificationCategory.SYSTEM.value,
            "severity": NotificationSeverity(severity).value,
            "createdAt": now_in_app_timezone().isoformat(),
            "metadata": dict(metadata or {}),
        }
        delivered = await pusher.broadcast(SYSTEM_NOTIFICATION, payload)
        self._audit.record("notification.broadcast", None, title=title, delivered=delivered)
        logger.info("Broadcasted system notification to %d connections", delivered)
        return delivered

    # Reads

    def build_filters(
        self,
        *,
        category: NotificationCategory | str | None = None,
        read: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> NotificationFilters:
        return NotificationFilters(
            category=NotificationCategory(category) if category else None,
            read=read,
            limit=self._default_page_size if limit is None else limit,
            offset=offset or 0,
        ).clamped(max_limit=self._max_page_size)

    async def get_user_notifications(
        self, user_id: str, filters: NotificationFilters | None = None
    ) -> NotificationPage:
        if filters is None:
            filters = self.build_filters()
        else:
            filters = filters.clamped(max_limit=self._max_page_size)
        return await self._store.query(user_id, filters)

    async def get_unread_count(self, user_id: str) -> int:
        return await self._store.count_unread(user_id)

    async def get_notification_stats(self, user_id: str) -> NotificationStats:
        return await self._store.stats(user_id)

    # Read state

    async def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification of ``user_id`` as read.

        Returns ``False`` when the store fails or no notification of that user
        has ``notification_id``.
        """

        updated = await self._set_read(user_id, [notification_id])
        if not updated:
            return False
        self._audit.record("notification.read", user_id, notification_id=notification_id)
        return True

    async def mark_multiple_as_read(self, user_id: str, notification_ids: Iterable[str]) -> bool:
        ids = list(dict.fromkeys(str(notification_id) for notification_id in notification_ids))
        if not ids:
            return True
        updated = await self._set_read(user_id, ids)
        if updated is None:
            return False
        self._audit.record("notification.read_many", user_id, notification_ids=ids, updated=updated)
        return True

    async def mark_all_as_read(self, user_id: str) -> bool:
        updated = await self._set_read(user_id, None)
        if updated is None:
            return False
        self._audit.record("notification.read_all", user_id, updated=updated)
        return True

    async def _set_read(self, user_id: str, notification_ids: list[str] | None) -> int | None:
        try:
            return await self._store.set_read(user_id, notification_ids, read=True)
        except NotificationPersistenceError:
            logger.error("Failed to mark notifications as read for user %s", user_id)
            return None

    async def delete_notification(self, user_id: str, notification_id: str) -> bool:
        try:
            deleted = await self._store.delete(user_id, notification_id)
        except NotificationPersistenceError:
            logger.error("Failed to delete notification %s of user %s", notification_id, user_id)
            return False
        if deleted:
            self._audit.record("notification.deleted", user_id, notification_id=notification_id)
        return deleted

    # Retention

    async def cleanup_old_notifications(self, days_old: int | None = None) -> int:
        """Delete read notifications older than ``days_old`` days.

        Uses the configured retention policy when ``days_old`` is omitted.
        """

        policy = self._retention if days_old is None else self._retention.with_days(days_old)
        logger.info("Cleaning up read notifications older than %d days", policy.days_old)
        removed = await self._store.delete_read_older_than(policy.cutoff(now_in_app_timezone()))
        self._audit.record("notification.cleanup", None, days_old=policy.days_old, removed=removed)
        logger.info("Notification cleanup removed %d rows", removed)
        return removed


__all__ = ["NotificationService"]
