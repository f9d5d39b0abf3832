# -*- coding: utf-8 -*-
"""
app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: EcoPro
Fecha: 2026-10-02
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, BigIntPK, UTCDateTime
from .database import (
    engine,
    SessionLocal,
    get_async_session,
    get_async_session_context,
    check_database_health,
)

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "BigIntPK",
    "UTCDateTime",
    "engine",
    "SessionLocal",
    "get_async_session",
    "get_async_session_context",
    "check_database_health",
]
