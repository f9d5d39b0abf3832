# -*- coding: utf-8 -*-
"""
app/routes/master_routes.py

Router maestro con dos capas:
  - /api/... (interno/estable)
  - rutas públicas sin prefijo

Ambas capas montan los mismos routers de dominio (códigos de suscripción
y billing); el webhook del procesador queda así disponible tanto en
/webhook/payment-processor como en /api/webhook/payment-processor.

Autor: EcoPro
Fecha: 2026-10-13
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.modules.billing import router as billing_router
from app.modules.subscription_codes import router as codes_router

logger = logging.getLogger(__name__)

# Capas principales
api = APIRouter(prefix="/api")
public = APIRouter(prefix="")  # sin prefijo

_loaded: list[str] = []  # trazabilidad/debug


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y registra trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.debug(
        "Router '%s' montado en prefix '%s' (router.prefix='%s')",
        name,
        target.prefix or "/",
        getattr(router, "prefix", ""),
    )


# ─────────────────────────────────────────
# SUBSCRIPTION CODES (/codes/*)
# ─────────────────────────────────────────
_include(api, codes_router, "subscription_codes")
_include(public, codes_router, "subscription_codes")

# ─────────────────────────────────────────
# BILLING (/billing/*, /webhook/payment-processor)
# ─────────────────────────────────────────
_include(api, billing_router, "billing")
_include(public, billing_router, "billing")


@api.get("/_debug/loaded-routers", include_in_schema=False)
def loaded_routers():
    """Routers montados y la capa donde viven."""
    return {"loaded": _loaded}


router = APIRouter()
router.include_router(api)
router.include_router(public)

__all__ = ["api", "public", "router"]

# Fin del archivo app/routes/master_routes.py
