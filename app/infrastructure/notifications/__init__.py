"""Realtime notification helpers for the infrastructure layer."""

from .connection import Connection, ConnectionState
from .credentials import (
    HTTP_CREDENTIAL_SOURCES,
    WEBSOCKET_CREDENTIAL_SOURCES,
    CredentialLookup,
    CredentialSource,
    extract_credential,
)
from .gateway import NotificationGateway
from .protocol import serialize_notification
from .registry import ConnectionRegistry

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ConnectionState",
    "CredentialLookup",
    "CredentialSource",
    "HTTP_CREDENTIAL_SOURCES",
    "NotificationGateway",
    "WEBSOCKET_CREDENTIAL_SOURCES",
    "extract_credential",
    "serialize_notification",
]
