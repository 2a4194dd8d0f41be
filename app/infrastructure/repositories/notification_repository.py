"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeVar

import anyio
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationFilters,
    NotificationPage,
    NotificationSeverity,
    NotificationStats,
)
from app.domain.exceptions import NotificationPersistenceError
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Every method except :meth:`delete_read_older_than` filters by ``user_id``
    so one user can never read or change the rows of another.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self, user_id: str, filters: NotificationFilters
    ) -> NotificationPage:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if filters.category is not None:
            query = query.filter(
                NotificationModel.category == NotificationCategory(filters.category).value
            )
        if filters.read is not None:
            query = query.filter(NotificationModel.read.is_(filters.read))

        total = query.count()
        models = (
            query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )
        return NotificationPage(
            notifications=[self._to_entity(model) for model in models], total=total
        )

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .scalar()
            or 0
        )

    def set_read(
        self,
        user_id: str,
        notification_ids: Iterable[str] | None,
        *,
        read: bool = True,
    ) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if notification_ids is None:
            query = query.filter(NotificationModel.read.is_(not read))
        else:
            ids = [str(notification_id) for notification_id in notification_ids if notification_id]
            if not ids:
                return 0
            query = query.filter(NotificationModel.id.in_(ids))

        updated = query.update({NotificationModel.read: read}, synchronize_session=False)
        self.session.commit()
        return updated

    def delete(self, user_id: str, notification_id: str) -> bool:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == str(notification_id),
                NotificationModel.user_id == user_id,
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def stats(self, user_id: str) -> NotificationStats:
        rows = (
            self.session.query(
                NotificationModel.category,
                NotificationModel.read,
                func.count(NotificationModel.id),
            )
            .filter(NotificationModel.user_id == user_id)
            .group_by(NotificationModel.category, NotificationModel.read)
            .all()
        )
        by_category = NotificationStats.empty_histogram()
        total = 0
        unread = 0
        for category, is_read, count in rows:
            total += count
            if not is_read:
                unread += count
            try:
                by_category[NotificationCategory(category)] += count
            except ValueError:
                logger.warning("Ignoring notifications with unknown category %r", category)
        return NotificationStats(total=total, unread=unread, by_category=by_category)

    def delete_read_older_than(self, cutoff: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.read.is_(True))
            .filter(NotificationModel.created_at < ensure_app_naive_datetime(cutoff))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.id = notification.id or str(uuid.uuid4())
        model.user_id = notification.user_id
        model.title = notification.title
        model.message = notification.message
        model.category = NotificationCategory(notification.category).value
        model.severity = NotificationSeverity(notification.severity).value
        model.action_url = notification.action_url
        model.action_button_text = notification.action_button_text
        model.callback = notification.callback
        model.read = bool(notification.read)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.extra = dict(notification.metadata or {})

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            category=NotificationCategory(model.category),
            severity=NotificationSeverity(model.severity or NotificationSeverity.INFO.value),
            action_url=model.action_url,
            action_button_text=model.action_button_text,
            callback=model.callback,
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            metadata=dict(model.extra or {}),
        )


class SqlAlchemyNotificationStore:
    """Asynchronous notification store backed by :class:`NotificationRepository`.

    Each call runs in a worker thread with its own session, so the event loop
    only suspends while the database is working.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def insert(self, notification: Notification) -> Notification:
        return await self._run(lambda repository: repository.create(notification))

    async def query(self, user_id: str, filters: NotificationFilters) -> NotificationPage:
        return await self._run(lambda repository: repository.list_for_user(user_id, filters))

    async def count_unread(self, user_id: str) -> int:
        return await self._run(lambda repository: repository.count_unread(user_id))

    async def set_read(
        self,
        user_id: str,
        notification_ids: Iterable[str] | None,
        *,
        read: bool = True,
    ) -> int:
        ids = None if notification_ids is None else list(notification_ids)
        return await self._run(
            lambda repository: repository.set_read(user_id, ids, read=read)
        )

    async def delete(self, user_id: str, notification_id: str) -> bool:
        return await self._run(lambda repository: repository.delete(user_id, notification_id))

    async def stats(self, user_id: str) -> NotificationStats:
        return await self._run(lambda repository: repository.stats(user_id))

    async def delete_read_older_than(self, cutoff: datetime) -> int:
        return await self._run(lambda repository: repository.delete_read_older_than(cutoff))

    async def _run(self, operation: Callable[[NotificationRepository], T]) -> T:
        return await anyio.to_thread.run_sync(self._execute, operation)

    def _execute(self, operation: Callable[[NotificationRepository], T]) -> T:
        with self._session_factory() as session:
            try:
                return operation(NotificationRepository(session))
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Notification store operation failed: %s", exc)
                raise NotificationPersistenceError("Notification store unavailable") from exc


__all__ = ["NotificationRepository", "SqlAlchemyNotificationStore"]
