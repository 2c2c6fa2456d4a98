"""
Test owner context resolution
"""
from datetime import timedelta

import pytest
from fastapi import HTTPException, status
from jose import jwt

from app.core.auth import create_access_token, decode_owner_id
from app.core.config import settings

API = settings.API_V1_STR


def test_token_round_trip():
    token = create_access_token("owner-a")

    assert decode_owner_id(token) == "owner-a"


def test_expired_token_rejected():
    token = create_access_token("owner-a", expires_delta=timedelta(minutes=-1))

    with pytest.raises(HTTPException) as exc_info:
        decode_owner_id(token)
    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_without_subject_rejected():
    token = jwt.encode({"foo": "bar"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    with pytest.raises(HTTPException):
        decode_owner_id(token)


def test_token_signed_with_other_key_rejected():
    token = jwt.encode({"sub": "owner-a"}, "not-the-secret", algorithm=settings.ALGORITHM)

    with pytest.raises(HTTPException):
        decode_owner_id(token)


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("get", "/days/2024-03-01/expenses"),
    ("get", "/days/2024-03-01/wagers"),
    ("get", "/days/2024-03-01/opening-balance"),
    ("post", "/days/2024-03-01/finalize"),
    ("get", "/days/2024-03-01"),
    ("get", "/finalized-days"),
    ("delete", "/days/2024-03-01/expenses/1"),
])
async def test_missing_owner_is_401(client, method, path):
    response = await client.request(method.upper(), f"{API}{path}")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_missing_owner_on_create_is_401(client):
    response = await client.post(
        f"{API}/days/2024-03-01/expenses",
        json={"category": "Servicios", "amount": "1"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_invalid_token_is_401(client):
    response = await client.get(
        f"{API}/days/2024-03-01",
        headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
