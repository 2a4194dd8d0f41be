"""Security helpers for issuing and verifying bearer credentials."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import Settings, get_settings
from app.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Claims inspected, in order, to find the user id inside a verified token.
USER_ID_CLAIMS: tuple[str, ...] = ("sub", "userId", "id")


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    *,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode(
        {**data, "exp": expire}, settings.secret_key, algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str, *, settings: Settings | None = None) -> dict[str, Any]:
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


class JwtIdentityVerifier:
    """Verify signed JWT bearer credentials and return the user id they carry."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def verify(self, credential: str) -> str:
        if not credential:
            raise AuthenticationError("Missing credential")
        try:
            payload = decode_access_token(credential, settings=self._settings)
        except ValueError as exc:
            logger.warning("Token verification failed: %s", exc.__cause__ or exc)
            raise AuthenticationError("Invalid credential") from exc

        for claim in USER_ID_CLAIMS:
            user_id = payload.get(claim)
            if user_id not in (None, ""):
                return str(user_id)

        logger.warning("Token valid but no user id claim found in payload")
        raise AuthenticationError("Credential does not identify a user")


__all__ = [
    "JwtIdentityVerifier",
    "USER_ID_CLAIMS",
    "create_access_token",
    "decode_access_token",
]
