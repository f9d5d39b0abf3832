# -*- coding: utf-8 -*-
"""
Tests para la validación JWT y los controles de rol.
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.modules.auth import Principal, UserRole, require_client, require_seller, validate_jwt_token
from app.modules.auth.security import create_access_token
from app.shared.config import get_settings


def test_valid_token_builds_principal():
    token = create_access_token(101, role="seller", email="s@example.com")

    principal = validate_jwt_token(token)

    assert principal == Principal(user_id=101, role=UserRole.seller, email="s@example.com")


def test_missing_role_defaults_to_client():
    principal = validate_jwt_token(create_access_token(5))
    assert principal.role == UserRole.client


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        create_access_token(101, expires_delta=timedelta(seconds=-5)),
        create_access_token("abc"),
        create_access_token(101, role="superuser"),
        jwt.encode({"sub": "101"}, "another-secret-key-with-enough-length!!", algorithm="HS256"),
    ],
)
def test_invalid_tokens_are_401(token):
    with pytest.raises(HTTPException) as exc_info:
        validate_jwt_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


def test_token_without_sub_is_401():
    settings = get_settings()
    token = jwt.encode(
        {"role": "client"},
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(HTTPException) as exc_info:
        validate_jwt_token(token)
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_role_checks():
    client = Principal(user_id=1, role=UserRole.client)
    seller = Principal(user_id=2, role=UserRole.seller)
    admin = Principal(user_id=3, role=UserRole.admin)

    assert await require_client(principal=client) is client
    assert await require_seller(principal=seller) is seller
    assert await require_client(principal=admin) is admin
    assert await require_seller(principal=admin) is admin

    with pytest.raises(HTTPException) as exc_info:
        await require_seller(principal=client)
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException):
        await require_client(principal=seller)
