"""Handle wrapping one physical realtime connection."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from starlette.websockets import WebSocket

from app.utils import now_in_app_timezone


class ConnectionState(Enum):
    """Lifecycle states of a realtime connection."""

    PENDING = "pending"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    CLOSED = "closed"


class Connection:
    """One websocket plus the identity it authenticated as.

    ``user_id`` is assigned exactly once, when the connection authenticates.
    Instances hash by identity, so each one is a distinct registry handle.
    """

    def __init__(self, websocket: WebSocket, *, connection_id: str | None = None) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.websocket = websocket
        self.user_id: str | None = None
        self.state = ConnectionState.PENDING
        self.connected_at = now_in_app_timezone()

    @property
    def is_authenticated(self) -> bool:
        return self.state is ConnectionState.AUTHENTICATED

    @property
    def was_authenticated(self) -> bool:
        """Return ``True`` when the connection reached the authenticated state."""

        return self.user_id is not None

    def authenticate(self, user_id: str) -> None:
        if self.state is not ConnectionState.PENDING:
            raise RuntimeError(f"Cannot authenticate a connection in state {self.state.value}")
        self.user_id = user_id
        self.state = ConnectionState.AUTHENTICATED

    def reject(self) -> None:
        self.state = ConnectionState.REJECTED

    def mark_closed(self) -> None:
        self.state = ConnectionState.CLOSED

    async def send_event(self, event: str, data: Any) -> None:
        await self.websocket.send_json({"event": event, "data": data})

    async def close(self, code: int = 1000) -> None:
        await self.websocket.close(code=code)

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, user_id={self.user_id!r}, state={self.state.value!r})"


__all__ = ["Connection", "ConnectionState"]
