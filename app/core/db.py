# -*- coding: utf-8 -*-
"""
app/core/db.py

Fachada para la capa de acceso a datos basada en SQLAlchemy async.
Envuelve `app.shared.database.database` para que los módulos dependan
de `app.core` sin conocer la implementación interna.

Autor: EcoPro
Fecha: 2026-10-02
"""

from app.shared.database.database import (
    engine,
    SessionLocal,
    Base,
    get_async_session,
    get_async_session_context,
    check_database_health,
)


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "get_async_session_context",
    "check_database_health",
]

# Fin del archivo app/core/db.py
