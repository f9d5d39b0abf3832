# -*- coding: utf-8 -*-
"""
app/modules/auth/security.py

Seguridad para Auth en EcoPro:
- Esquema OAuth2 (Bearer)
- Creación / decodificación de JWT

Los tokens los emite el servicio de identidad; este backend solo los
valida. create_access_token se conserva para tests y herramientas de
operación.

Autor: EcoPro
Fecha: 2026-10-06
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Optional, Union

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.shared.config import get_settings
from app.shared.utils.datetime_helpers import utcnow

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class TokenDecodeError(Exception):
    """Error al decodificar/validar un token JWT."""


def create_access_token(
    subject: Union[str, int],
    expires_delta: Optional[timedelta] = None,
    **extra: Any,
) -> str:
    """
    Crea un JWT con claim 'sub' y claims opcionales en `extra`
    (role, email).
    """
    settings = get_settings()
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    to_encode.update(extra)
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida un JWT. Lanza TokenDecodeError si es inválido/expirado.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise TokenDecodeError("Token inválido o expirado") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).strip():
        raise TokenDecodeError("Token sin 'sub'")
    return payload


__all__ = [
    "oauth2_scheme",
    "TokenDecodeError",
    "create_access_token",
    "decode_access_token",
]
# Fin del archivo app/modules/auth/security.py
