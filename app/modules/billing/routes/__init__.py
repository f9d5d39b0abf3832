# -*- coding: utf-8 -*-
"""
app/modules/billing/routes/__init__.py

Billing routes package.
"""

from .subscription_routes import router as subscription_router

__all__ = ["subscription_router"]
