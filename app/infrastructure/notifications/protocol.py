"""Wire protocol spoken over the notification websocket.

Every frame is a JSON object ``{"event": <name>, "data": <payload>}``. Clients
may use ``type`` instead of ``event`` for the name and may put the payload
fields at the top level instead of under ``data``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import (
    MAX_OFFSET,
    Notification,
    NotificationCategory,
    NotificationSeverity,
)

# Client -> server
SUBSCRIBE_NOTIFICATIONS = "subscribe-notifications"
MARK_AS_READ = "mark-as-read"
MARK_ALL_AS_READ = "mark-all-as-read"
GET_NOTIFICATIONS = "get-notifications"
PING = "ping"

CLIENT_EVENTS = frozenset(
    {SUBSCRIBE_NOTIFICATIONS, MARK_AS_READ, MARK_ALL_AS_READ, GET_NOTIFICATIONS, PING}
)

# Server -> client
UNREAD_COUNT = "unread-count"
INITIAL_NOTIFICATIONS = "initial-notifications"
NEW_NOTIFICATION = "new-notification"
NOTIFICATIONS_LIST = "notifications-list"
MARKED_AS_READ = "marked-as-read"
ALL_MARKED_AS_READ = "all-marked-as-read"
SYSTEM_NOTIFICATION = "system-notification"
PONG = "pong"


@dataclass(frozen=True)
class ClientMessage:
    """A decoded client frame."""

    event: str
    data: dict[str, Any] = field(default_factory=dict)


class MarkAsReadPayload(BaseModel):
    """Payload of ``mark-as-read``."""

    model_config = ConfigDict(populate_by_name=True)

    notification_id: str = Field(alias="notificationId", min_length=1)


class GetNotificationsPayload(BaseModel):
    """Payload of ``get-notifications``."""

    type: NotificationCategory | None = None
    read: bool | None = None
    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0, le=MAX_OFFSET)


def parse_client_message(raw: Any) -> ClientMessage | None:
    """Return the decoded frame, or ``None`` when it is not a known message."""

    if not isinstance(raw, dict):
        return None
    event = raw.get("event", raw.get("type"))
    if not isinstance(event, str) or event not in CLIENT_EVENTS:
        return None
    data = raw.get("data")
    if data is None:
        data = {key: value for key, value in raw.items() if key not in ("event", "type")}
    if not isinstance(data, dict):
        return None
    return ClientMessage(event=event, data=data)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "title": notification.title,
        "message": notification.message,
        "type": NotificationCategory(notification.category).value,
        "severity": NotificationSeverity(notification.severity).value,
        "actionUrl": notification.action_url,
        "actionButtonText": notification.action_button_text,
        "callback": notification.callback,
        "read": notification.read,
        "createdAt": notification.created_at.isoformat() if notification.created_at else None,
        "metadata": dict(notification.metadata or {}),
    }


__all__ = [
    "ALL_MARKED_AS_READ",
    "CLIENT_EVENTS",
    "ClientMessage",
    "GET_NOTIFICATIONS",
    "GetNotificationsPayload",
    "INITIAL_NOTIFICATIONS",
    "MARKED_AS_READ",
    "MARK_ALL_AS_READ",
    "MARK_AS_READ",
    "MarkAsReadPayload",
    "NEW_NOTIFICATION",
    "NOTIFICATIONS_LIST",
    "PING",
    "PONG",
    "SUBSCRIBE_NOTIFICATIONS",
    "SYSTEM_NOTIFICATION",
    "UNREAD_COUNT",
    "parse_client_message",
    "serialize_notification",
]
