"""Extraction of bearer credentials from a connection handshake."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from starlette.requests import HTTPConnection


class CredentialSource(str, Enum):
    """Places a bearer credential may be read from."""

    QUERY_TOKEN = "query:token"
    QUERY_AUTH = "query:auth"
    AUTHORIZATION_HEADER = "header:authorization"
    COOKIE = "cookie:access_token"


# Order in which a websocket handshake is searched for a credential.
WEBSOCKET_CREDENTIAL_SOURCES: tuple[CredentialSource, ...] = (
    CredentialSource.QUERY_TOKEN,
    CredentialSource.QUERY_AUTH,
    CredentialSource.AUTHORIZATION_HEADER,
    CredentialSource.COOKIE,
)

HTTP_CREDENTIAL_SOURCES: tuple[CredentialSource, ...] = (
    CredentialSource.AUTHORIZATION_HEADER,
    CredentialSource.COOKIE,
)


@dataclass(frozen=True)
class CredentialLookup:
    """Result of searching a handshake for a credential."""

    token: str | None = None
    source: CredentialSource | None = None

    @property
    def found(self) -> bool:
        return self.token is not None


def _bearer_token(header_value: str | None) -> str | None:
    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def _read_source(connection: HTTPConnection, source: CredentialSource) -> str | None:
    if source is CredentialSource.QUERY_TOKEN:
        value = connection.query_params.get("token")
    elif source is CredentialSource.QUERY_AUTH:
        value = connection.query_params.get("auth")
    elif source is CredentialSource.AUTHORIZATION_HEADER:
        return _bearer_token(connection.headers.get("authorization"))
    else:
        value = connection.cookies.get("access_token")
    value = (value or "").strip()
    return value or None


def extract_credential(
    connection: HTTPConnection,
    sources: Sequence[CredentialSource] = WEBSOCKET_CREDENTIAL_SOURCES,
) -> CredentialLookup:
    """Return the first credential found in ``sources``, in order."""

    for source in sources:
        token = _read_source(connection, source)
        if token is not None:
            return CredentialLookup(token=token, source=source)
    return CredentialLookup()


__all__ = [
    "CredentialLookup",
    "CredentialSource",
    "HTTP_CREDENTIAL_SOURCES",
    "WEBSOCKET_CREDENTIAL_SOURCES",
    "extract_credential",
]
