"""Shared fixtures for the notification test-suite."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest
from starlette.websockets import WebSocketDisconnect

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from app.application.use_cases.notifications import NotificationService
from app.domain.exceptions import AuthenticationError, NotificationPersistenceError
from app.infrastructure.notifications import NotificationGateway
from app.infrastructure.repositories import InMemoryNotificationStore
from app.utils import configure_app_timezone


class FakeWebSocket:
    """Minimal stand-in for a Starlette websocket."""

    def __init__(
        self,
        *,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        incoming: list[Any] | None = None,
    ) -> None:
        self.query_params = dict(query or {})
        self.headers = {key.lower(): value for key, value in (headers or {}).items()}
        self.cookies = dict(cookies or {})
        self.incoming = list(incoming or [])
        self.accepted = False
        self.closed_code: int | None = None
        self.fail_on_send = False
        self.sent: list[dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def close(self, code: int = 1000) -> None:
        self.closed_code = code

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.fail_on_send:
            raise RuntimeError("socket is gone")
        self.sent.append(data)

    async def receive_json(self) -> Any:
        if not self.incoming:
            raise WebSocketDisconnect(code=1000)
        item = self.incoming.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def events(self) -> list[str]:
        return [frame["event"] for frame in self.sent]

    def frames(self, event: str) -> list[Any]:
        return [frame["data"] for frame in self.sent if frame["event"] == event]

    def clear(self) -> None:
        self.sent.clear()


class StaticVerifier:
    """Identity verifier backed by a fixed token table."""

    def __init__(self, tokens: dict[str, str]) -> None:
        self.tokens = tokens

    async def verify(self, credential: str) -> str:
        try:
            return self.tokens[credential]
        except KeyError as exc:
            raise AuthenticationError("Invalid credential") from exc


class RecordingAuditSink:
    def __init__(self) -> None:
        self.records: list[tuple[str, str | None, dict[str, Any]]] = []

    def record(self, action: str, user_id: str | None, **details: Any) -> None:
        self.records.append((action, user_id, details))

    def actions(self) -> list[str]:
        return [action for action, _, _ in self.records]


class BrokenStore(InMemoryNotificationStore):
    """In-memory store whose writes fail like an unreachable database."""

    async def insert(self, notification):
        raise NotificationPersistenceError("database is down")

    async def set_read(self, user_id, notification_ids, *, read=True):
        raise NotificationPersistenceError("database is down")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def app_timezone():
    """Run every test in UTC, whatever timezone an app built during it configured."""

    configure_app_timezone("UTC")
    yield
    configure_app_timezone("UTC")


@pytest.fixture
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def audit() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def service(store: InMemoryNotificationStore, audit: RecordingAuditSink) -> NotificationService:
    return NotificationService(store, audit=audit)


@pytest.fixture
def verifier() -> StaticVerifier:
    return StaticVerifier({"alice-token": "alice", "bob-token": "bob"})


@pytest.fixture
def gateway(service: NotificationService, verifier: StaticVerifier) -> NotificationGateway:
    return NotificationGateway(service, verifier)


@pytest.fixture
def connect(gateway: NotificationGateway):
    """Return a coroutine that opens an authenticated fake connection."""

    async def _connect(token: str = "alice-token"):
        websocket = FakeWebSocket(query={"token": token})
        connection = await gateway.connect(websocket)
        return connection, websocket

    return _connect


@pytest.fixture
def websocket_factory():
    return FakeWebSocket


@pytest.fixture
def broken_service(audit: RecordingAuditSink) -> NotificationService:
    return NotificationService(BrokenStore(), audit=audit)
