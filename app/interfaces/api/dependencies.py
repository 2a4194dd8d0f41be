"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from starlette.requests import HTTPConnection

from app.application.use_cases.notifications import NotificationService
from app.domain.exceptions import AuthenticationError
from app.infrastructure.notifications import (
    HTTP_CREDENTIAL_SOURCES,
    NotificationGateway,
    extract_credential,
)
from app.interfaces.api.container import NotificationContainer


def get_container(connection: HTTPConnection) -> NotificationContainer:
    """Return the components wired for the running application."""

    return connection.app.state.container


def get_notification_service(
    container: NotificationContainer = Depends(get_container),
) -> NotificationService:
    return container.service


def get_notification_gateway(
    container: NotificationContainer = Depends(get_container),
) -> NotificationGateway:
    return container.gateway


async def get_current_user_id(
    connection: HTTPConnection,
    container: NotificationContainer = Depends(get_container),
) -> str:
    """Return the user id carried by the bearer credential of the request."""

    lookup = extract_credential(connection, HTTP_CREDENTIAL_SOURCES)
    if not lookup.found:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await container.verifier.verify(lookup.token or "")
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
