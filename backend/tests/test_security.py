"""
Tests for password hashing, session tokens and the auth dependencies.
"""
from datetime import timedelta

import jwt
import pytest
from httpx import AsyncClient

from jobboard.config import settings
from jobboard.errors import AuthenticationError, ValidationError
from jobboard.services.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from tests.conftest import auth_headers


def test_hash_is_bcrypt_and_salted():
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert first.startswith("$2b$")
    assert first != second
    assert verify_password("s3cret", first)
    assert not verify_password("wrong", first)


def test_verify_without_hash_is_false():
    assert not verify_password("anything", None)


def test_verify_rejects_non_bcrypt_values():
    assert not verify_password("plain", "plain")


def test_hash_refuses_password_over_bcrypt_limit():
    with pytest.raises(ValidationError, match="72 bytes"):
        hash_password("x" * 73)


def test_verify_long_password_is_false_not_an_error():
    stored = hash_password("x" * 72)

    assert verify_password("x" * 72, stored)
    # Same first 72 bytes, but bcrypt would silently ignore the tail
    assert not verify_password("x" * 80, stored)
    assert not verify_password("x" * 80, None)


def test_token_round_trip():
    token = create_access_token("1234", "JOB_SEEKER")

    payload = decode_access_token(token)

    assert payload["sub"] == "1234"
    assert payload["role"] == "JOB_SEEKER"


def test_expired_token_is_rejected():
    token = create_access_token("1234", "JOB_SEEKER", expires_delta=timedelta(seconds=-1))

    with pytest.raises(AuthenticationError, match="expired"):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "1234", "type": "access"}, "another-key", algorithm=settings.jwt_algorithm)

    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_legacy_unsigned_token_is_rejected():
    with pytest.raises(AuthenticationError):
        decode_access_token("token-1234-1700000000000")


@pytest.mark.asyncio
async def test_protected_endpoint_requires_token(async_client: AsyncClient):
    response = await async_client.get("/api/auth/profile")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_protected_endpoint_rejects_garbage_token(async_client: AsyncClient):
    response = await async_client.get(
        "/api/auth/profile", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_inactive_user_is_rejected(async_client: AsyncClient, db, seeker):
    headers = auth_headers(seeker)
    seeker.is_active = False
    await db.commit()

    response = await async_client.get("/api/auth/profile", headers=headers)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cookie_token_is_accepted(async_client: AsyncClient, seeker):
    async_client.cookies.set("auth_token", create_access_token(seeker.id, seeker.role.value))

    response = await async_client.get("/api/auth/profile")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == seeker.email


@pytest.mark.asyncio
async def test_role_dependency_blocks_other_role(async_client: AsyncClient, seeker):
    response = await async_client.get("/api/jobs/my-jobs", headers=auth_headers(seeker))

    assert response.status_code == 403
