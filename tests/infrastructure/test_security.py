"""Tests for JWT credential issuing and verification."""

from datetime import timedelta

import pytest
from jose import jwt

from app.config import Settings
from app.domain.exceptions import AuthenticationError
from app.infrastructure.security import JwtIdentityVerifier, create_access_token


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite:///:memory:", secret_key="unit-test-secret")


@pytest.mark.anyio
async def test_verify_returns_sub_claim(settings):
    token = create_access_token({"sub": "alice"}, settings=settings)

    assert await JwtIdentityVerifier(settings).verify(token) == "alice"


@pytest.mark.anyio
@pytest.mark.parametrize("claim", ["userId", "id"])
async def test_verify_falls_back_to_alternative_claims(settings, claim):
    token = create_access_token({claim: 42}, settings=settings)

    assert await JwtIdentityVerifier(settings).verify(token) == "42"


@pytest.mark.anyio
async def test_verify_rejects_token_signed_with_other_key(settings):
    token = jwt.encode({"sub": "alice"}, "another-secret", algorithm="HS256")

    with pytest.raises(AuthenticationError):
        await JwtIdentityVerifier(settings).verify(token)


@pytest.mark.anyio
async def test_verify_rejects_expired_token(settings):
    token = create_access_token({"sub": "alice"}, timedelta(minutes=-5), settings=settings)

    with pytest.raises(AuthenticationError):
        await JwtIdentityVerifier(settings).verify(token)


@pytest.mark.anyio
async def test_verify_rejects_token_without_user_claim(settings):
    token = create_access_token({"scope": "notifications"}, settings=settings)

    with pytest.raises(AuthenticationError):
        await JwtIdentityVerifier(settings).verify(token)


@pytest.mark.anyio
async def test_verify_rejects_garbage(settings):
    with pytest.raises(AuthenticationError):
        await JwtIdentityVerifier(settings).verify("not-a-jwt")
