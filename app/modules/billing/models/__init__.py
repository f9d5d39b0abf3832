# -*- coding: utf-8 -*-
"""
app/modules/billing/models/__init__.py

Modelos ORM de billing.
Este módulo NO importa services ni routers para evitar imports circulares.

Uso:
    from app.modules.billing.models import Subscription, Payment, CheckoutSession

Autor: EcoPro
Fecha: 2026-10-09
"""

from app.modules.billing.models.checkout_session import (
    CheckoutSession,
    CheckoutSessionStatus,
)
from app.modules.billing.models.payment import Payment, PaymentStatus
from app.modules.billing.models.subscription import Subscription, SubscriptionStatus

__all__ = [
    "Subscription",
    "SubscriptionStatus",
    "Payment",
    "PaymentStatus",
    "CheckoutSession",
    "CheckoutSessionStatus",
]
