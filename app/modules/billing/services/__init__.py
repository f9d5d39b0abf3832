# -*- coding: utf-8 -*-
"""
app/modules/billing/services/__init__.py

Servicios de billing: suscripciones y checkout.
"""

from .checkout_service import CheckoutResult, CheckoutService
from .subscription_service import AccessVerdict, SubscriptionService

__all__ = [
    "AccessVerdict",
    "CheckoutResult",
    "CheckoutService",
    "SubscriptionService",
]
