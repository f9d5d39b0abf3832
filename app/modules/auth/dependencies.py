# -*- coding: utf-8 -*-
"""
app/modules/auth/dependencies.py

Dependencias de autenticación JWT para FastAPI.

Provee:
- validate_jwt_token: valida el token y construye el Principal
- get_current_principal: dependencia con oauth2_scheme
- require_client / require_seller: control de rol

NOTA: La autenticación de servicio interno (InternalServiceAuth) está en
app.shared.internal_auth.

Autor: EcoPro
Fecha: 2026-10-06
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status

from .enums import UserRole
from .security import TokenDecodeError, decode_access_token, oauth2_scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Identidad autenticada extraída del JWT."""

    user_id: int
    role: UserRole
    email: Optional[str] = None


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "invalid_token", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_jwt_token(token: str) -> Principal:
    """
    Valida un JWT y construye el Principal.

    Raises:
        HTTPException 401: token inválido, expirado, o con sub/role inválidos.
    """
    try:
        payload = decode_access_token(token)
    except TokenDecodeError as e:
        raise _unauthorized(str(e)) from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise _unauthorized("Token does not contain a numeric user identifier") from e

    try:
        role = UserRole(payload.get("role", UserRole.client))
    except ValueError as e:
        raise _unauthorized("Token contains an unknown role") from e

    return Principal(user_id=user_id, role=role, email=payload.get("email"))


async def get_current_principal(
    token: str = Depends(oauth2_scheme),
) -> Principal:
    return validate_jwt_token(token)


def _require_roles(*roles: UserRole):
    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            logger.warning(
                "Role check failed: user=%s role=%s required=%s",
                principal.user_id,
                principal.role,
                ",".join(roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"error": "forbidden", "message": "Insufficient role"},
            )
        return principal

    return dependency


# Los admins pasan ambos controles
require_client = _require_roles(UserRole.client, UserRole.admin)
require_seller = _require_roles(UserRole.seller, UserRole.admin)


__all__ = [
    "Principal",
    "validate_jwt_token",
    "get_current_principal",
    "require_client",
    "require_seller",
]
