# -*- coding: utf-8 -*-
"""
app/core/__init__.py

Fachada unificada para componentes centrales del backend:
- Configuración (settings)
- Logging
- Motor de base de datos y sesiones

Autor: EcoPro
Fecha: 2026-10-02
"""

from .settings import get_settings
from .logging import setup_logging
from .db import (
    engine,
    SessionLocal,
    Base,
    get_async_session,
    get_async_session_context,
    check_database_health,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "get_async_session_context",
    "check_database_health",
]

# Fin del archivo app/core/__init__.py
