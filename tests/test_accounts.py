"""Tests for staff accounts, password hashing and tokens."""

import datetime

import pytest
from fastapi import HTTPException
from jose import jwt

from prisonsphere import accounts, security
from prisonsphere.errors import Conflict, DomainError, NotFound


def test_password_hash_roundtrip():
    hashed = security.hash_password("s3cret")
    assert hashed != "s3cret"
    assert security.verify_password("s3cret", hashed)
    assert not security.verify_password("wrong", hashed)


def test_long_passwords_are_truncated_consistently():
    hashed = security.hash_password("x" * 100)
    assert security.verify_password("x" * 72, hashed)


def test_token_carries_id_and_role(warden):
    claims = security.decode_token(security.create_access_token(warden))
    assert claims["id"] == warden.id
    assert claims["role"] == "warden"


def test_expired_token_is_rejected(warden):
    expired = jwt.encode(
        {
            "id": warden.id,
            "role": warden.role,
            "exp": datetime.datetime.now(datetime.timezone.utc)
            - datetime.timedelta(minutes=1),
        },
        security.get_secret_key(),
        algorithm=security.ALGORITHM,
    )
    with pytest.raises(HTTPException) as excinfo:
        security.decode_token(expired)
    assert excinfo.value.status_code == 401


def test_tampered_token_is_rejected(warden):
    forged = jwt.encode(
        {"id": warden.id, "role": "warden"}, "another-secret", algorithm="HS256"
    )
    with pytest.raises(HTTPException):
        security.decode_token(forged)


async def test_authenticate(session, warden):
    assert (await security.authenticate(session, "warden", "wardenpass")).id == warden.id
    assert await security.authenticate(session, "warden", "nope") is None
    assert await security.authenticate(session, "ghost", "wardenpass") is None


async def test_create_duplicate_user(session, warden):
    with pytest.raises(Conflict):
        await accounts.create_user(session, "warden", "other", "admin")


async def test_create_user_with_unknown_role(session):
    with pytest.raises(DomainError):
        await accounts.create_user(session, "guard", "pass", "guard")


async def test_update_and_delete_user(session, admin):
    updated = await accounts.update_user(session, "admin", password="newpass", role="warden")
    assert updated.role == "warden"
    assert await security.authenticate(session, "admin", "newpass") is not None

    await accounts.delete_user(session, "admin")
    with pytest.raises(NotFound):
        await accounts.get_user(session, "admin")


async def test_list_users(session, warden, admin):
    assert [user.username for user in await accounts.list_users(session)] == [
        "admin",
        "warden",
    ]
