# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/__init__.py

Ciclo de vida de códigos de suscripción:
solicitud -> emisión -> canje / expiración.

Expone el router para app.routes.master_routes.
"""

from .routes import router

__all__ = ["router"]
