"""Realtime gateway between notification websockets and the notification service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, FrozenSet

from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from app.domain.exceptions import AuthenticationError, NotificationPersistenceError
from app.domain.ports import IdentityVerifier

from .connection import Connection, ConnectionState
from .credentials import WEBSOCKET_CREDENTIAL_SOURCES, CredentialSource, extract_credential
from .protocol import (
    ALL_MARKED_AS_READ,
    GET_NOTIFICATIONS,
    INITIAL_NOTIFICATIONS,
    MARK_ALL_AS_READ,
    MARK_AS_READ,
    MARKED_AS_READ,
    NOTIFICATIONS_LIST,
    PING,
    PONG,
    SUBSCRIBE_NOTIFICATIONS,
    UNREAD_COUNT,
    ClientMessage,
    GetNotificationsPayload,
    MarkAsReadPayload,
    parse_client_message,
    serialize_notification,
)
from .registry import ConnectionRegistry

if TYPE_CHECKING:
    from app.application.use_cases.notifications.service import NotificationService

logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


class NotificationGateway:
    """Own the lifecycle of notification websockets.

    The gateway authenticates each connection at handshake time, registers it
    in the :class:`ConnectionRegistry`, dispatches client messages to the
    :class:`NotificationService` and emits server frames. It is the only
    writer of the registry and attaches itself to the service as its
    :class:`~app.domain.ports.NotificationPusher`.
    """

    def __init__(
        self,
        service: "NotificationService",
        verifier: IdentityVerifier,
        *,
        registry: ConnectionRegistry[Connection] | None = None,
        initial_notifications_limit: int = 10,
        credential_sources: Sequence[CredentialSource] = WEBSOCKET_CREDENTIAL_SOURCES,
    ) -> None:
        self._service = service
        self._verifier = verifier
        self._registry: ConnectionRegistry[Connection] = registry or ConnectionRegistry()
        self._initial_notifications_limit = initial_notifications_limit
        self._credential_sources = tuple(credential_sources)
        service.attach_pusher(self)

    @property
    def registry(self) -> ConnectionRegistry[Connection]:
        return self._registry

    # Connection lifecycle

    async def serve(self, websocket: WebSocket) -> None:
        """Run the full lifecycle of ``websocket`` until the client leaves."""

        connection = await self.connect(websocket)
        if connection is None:
            return
        try:
            while connection.is_authenticated:
                try:
                    raw = await websocket.receive_json()
                except WebSocketDisconnect:
                    raise
                except (KeyError, ValueError):
                    logger.debug("Ignoring undecodable frame on connection %s", connection.id)
                    continue
                await self.handle_message(connection, raw)
        except WebSocketDisconnect:
            pass
        finally:
            self.disconnect(connection)

    async def connect(self, websocket: WebSocket) -> Connection | None:
        """Authenticate and register ``websocket``.

        Returns the registered connection, or ``None`` when the attempt was
        rejected and the socket closed.
        """

        connection = Connection(websocket)
        lookup = extract_credential(websocket, self._credential_sources)
        if not lookup.found:
            logger.warning("Connection rejected: no credential provided")
            await self._reject(connection)
            return None

        try:
            user_id = await self._verifier.verify(lookup.token or "")
        except AuthenticationError as exc:
            logger.warning("Connection rejected: %s", exc)
            await self._reject(connection)
            return None

        await websocket.accept()
        connection.authenticate(user_id)
        self._registry.register(user_id, connection)
        logger.info(
            "Client connected: %s (User: %s, Total connections: %d)",
            connection.id,
            user_id,
            len(self._registry.connections_for(user_id)),
        )

        try:
            await self._send_initial_view(connection)
        except NotificationPersistenceError:
            logger.error("Could not load initial notifications for user %s", user_id)
            self.disconnect(connection)
            await self._close(connection, INTERNAL_ERROR)
            return None
        if not connection.is_authenticated:
            return None
        return connection

    async def _send_initial_view(self, connection: Connection) -> None:
        user_id = connection.user_id or ""
        count = await self._service.get_unread_count(user_id)
        await self.emit(connection, UNREAD_COUNT, {"count": count})
        page = await self._service.get_user_notifications(
            user_id,
            self._service.build_filters(read=False, limit=self._initial_notifications_limit),
        )
        await self.emit(
            connection,
            INITIAL_NOTIFICATIONS,
            {"notifications": [serialize_notification(n) for n in page.notifications]},
        )

    def disconnect(self, connection: Connection) -> None:
        """Unregister ``connection`` if it had authenticated."""

        if connection.state is ConnectionState.CLOSED:
            return
        if connection.was_authenticated and connection.user_id is not None:
            self._registry.unregister(connection.user_id, connection)
            logger.info("Client disconnected: %s (User: %s)", connection.id, connection.user_id)
        connection.mark_closed()

    async def _reject(self, connection: Connection) -> None:
        connection.reject()
        await self._close(connection, POLICY_VIOLATION)

    async def _close(self, connection: Connection, code: int) -> None:
        try:
            await connection.close(code)
        except (RuntimeError, WebSocketDisconnect):
            logger.debug("Connection %s already closed", connection.id)

    # Client messages

    async def handle_message(self, connection: Connection, raw: Any) -> None:
        """Dispatch one client frame; malformed or unauthenticated frames are ignored."""

        if not connection.is_authenticated:
            logger.debug("Ignoring message on unauthenticated connection %s", connection.id)
            return
        message = parse_client_message(raw)
        if message is None:
            logger.debug("Ignoring malformed message on connection %s: %r", connection.id, raw)
            return
        try:
            await self._dispatch(connection, message)
        except ValidationError as exc:
            logger.debug("Ignoring invalid %s payload: %s", message.event, exc.errors())
        except NotificationPersistenceError:
            logger.error(
                "Store failure while handling %s for user %s", message.event, connection.user_id
            )
        except Exception:
            logger.exception(
                "Unexpected error while handling %s on connection %s",
                message.event,
                connection.id,
            )

    async def _dispatch(self, connection: Connection, message: ClientMessage) -> None:
        user_id = connection.user_id or ""
        if message.event == PING:
            await self.emit(connection, PONG, {})
        elif message.event == SUBSCRIBE_NOTIFICATIONS:
            logger.info("User %s subscribed to notifications", user_id)
            count = await self._service.get_unread_count(user_id)
            await self.emit(connection, UNREAD_COUNT, {"count": count})
        elif message.event == MARK_AS_READ:
            payload = MarkAsReadPayload.model_validate(message.data)
            if await self._service.mark_as_read(user_id, payload.notification_id):
                await self.emit(
                    connection, MARKED_AS_READ, {"notificationId": payload.notification_id}
                )
                await self._service.publish_unread_count(user_id)
        elif message.event == MARK_ALL_AS_READ:
            if await self._service.mark_all_as_read(user_id):
                await self.emit(connection, ALL_MARKED_AS_READ, {})
                await self._service.publish_unread_count(user_id)
        elif message.event == GET_NOTIFICATIONS:
            payload = GetNotificationsPayload.model_validate(message.data)
            page = await self._service.get_user_notifications(
                user_id,
                self._service.build_filters(
                    category=payload.type,
                    read=payload.read,
                    limit=payload.limit,
                    offset=payload.offset,
                ),
            )
            await self.emit(
                connection,
                NOTIFICATIONS_LIST,
                {
                    "notifications": [serialize_notification(n) for n in page.notifications],
                    "total": page.total,
                },
            )

    # NotificationPusher

    def connections_for(self, user_id: str) -> FrozenSet[Connection]:
        return self._registry.connections_for(user_id)

    async def emit(self, handle: Connection, event: str, payload: Any) -> bool:
        """Send one frame to ``handle``; failures are logged, never raised."""

        try:
            await handle.send_event(event, payload)
        except Exception as exc:
            logger.warning(
                "Failed to push %s to connection %s (User: %s): %s",
                event,
                handle.id,
                handle.user_id,
                exc,
            )
            self.disconnect(handle)
            return False
        return True

    async def broadcast(self, event: str, payload: Any) -> int:
        delivered = 0
        for handle in self._registry.all_connections():
            if await self.emit(handle, event, payload):
                delivered += 1
        return delivered


__all__ = ["NotificationGateway", "POLICY_VIOLATION", "INTERNAL_ERROR"]
