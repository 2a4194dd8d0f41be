"""Wiring of the notification components for one application instance."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from app.application.use_cases.notifications import NotificationCleanupTask, NotificationService
from app.config import Settings
from app.domain.ports import AuditSink, IdentityVerifier, NotificationStore
from app.domain.retention import RetentionPolicy
from app.infrastructure.audit import LoggingAuditSink
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.notifications import ConnectionRegistry, NotificationGateway
from app.infrastructure.repositories import SqlAlchemyNotificationStore
from app.infrastructure.security import JwtIdentityVerifier
from app.utils import configure_app_timezone


@dataclass
class NotificationContainer:
    """Components shared by the HTTP routes and the websocket endpoint."""

    settings: Settings
    store: NotificationStore
    verifier: IdentityVerifier
    service: NotificationService
    gateway: NotificationGateway
    cleanup_task: NotificationCleanupTask | None = None
    engine: Engine | None = None

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def build_container(
    settings: Settings,
    *,
    store: NotificationStore | None = None,
    verifier: IdentityVerifier | None = None,
    audit: AuditSink | None = None,
) -> NotificationContainer:
    """Create the store, verifier, service and gateway described by ``settings``.

    Also sets the application timezone from ``settings.app_timezone``.

    When ``store`` is omitted a SQLAlchemy store is created for
    ``settings.database_url`` and its tables are created if missing.
    """

    configure_app_timezone(settings.app_timezone)

    engine: Engine | None = None
    if store is None:
        engine = create_database_engine(settings.database_url)
        initialize_database(engine)
        store = SqlAlchemyNotificationStore(create_session_factory(engine))

    service = NotificationService(
        store,
        audit=audit or LoggingAuditSink(),
        retention=RetentionPolicy(days_old=settings.notification_retention_days),
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    verifier = verifier or JwtIdentityVerifier(settings)
    gateway = NotificationGateway(
        service,
        verifier,
        registry=ConnectionRegistry(),
        initial_notifications_limit=settings.initial_notifications_limit,
    )
    cleanup_task = None
    if settings.cleanup_interval_minutes:
        cleanup_task = NotificationCleanupTask(
            service, interval_seconds=settings.cleanup_interval_minutes * 60
        )

    return NotificationContainer(
        settings=settings,
        store=store,
        verifier=verifier,
        service=service,
        gateway=gateway,
        cleanup_task=cleanup_task,
        engine=engine,
    )


__all__ = ["NotificationContainer", "build_container"]
