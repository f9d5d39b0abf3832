# -*- coding: utf-8 -*-
"""
app/modules/auth/__init__.py

Validación de identidad para el resto de módulos: el backend no emite
sesiones, solo verifica JWT emitidos por el servicio de identidad.
"""

from .dependencies import (
    Principal,
    get_current_principal,
    require_client,
    require_seller,
    validate_jwt_token,
)
from .enums import UserRole

__all__ = [
    "Principal",
    "UserRole",
    "get_current_principal",
    "require_client",
    "require_seller",
    "validate_jwt_token",
]
# Fin del archivo app/modules/auth/__init__.py
