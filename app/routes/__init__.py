# -*- coding: utf-8 -*-
"""
app/routes/__init__.py

Ensamblador principal de ruteadores de EcoPro Billing.

Responsabilidades:
- Incluir el router de health (/health).
- Reutilizar las capas `api` y `public` definidas en master_routes.py.

Autor: EcoPro
Fecha: 2026-10-13
"""

from fastapi import APIRouter

from .health_routes import router as health_router
from .master_routes import api, public

router = APIRouter()

# Health check sin prefijo adicional
router.include_router(health_router)

router.include_router(api)
router.include_router(public)

__all__ = ["router"]

# Fin del archivo app/routes/__init__.py
