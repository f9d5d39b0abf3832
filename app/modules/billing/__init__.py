# -*- coding: utf-8 -*-
"""
app/modules/billing/__init__.py

Módulo de billing: suscripciones, checkout y webhooks del procesador.

Exporta un router unificado que incluye:
- /billing/subscription, /billing/check-access, /billing/payments, /billing/checkout
- /webhook/payment-processor

Autor: EcoPro
Fecha: 2026-10-12
"""

from fastapi import APIRouter

from .routes import subscription_router
from .webhook_routes import router as billing_webhook_router

router = APIRouter()
router.include_router(subscription_router)
router.include_router(billing_webhook_router)

__all__ = ["router"]
