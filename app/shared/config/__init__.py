# -*- coding: utf-8 -*-
"""
app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import get_settings, get_codes_settings, get_payments_settings

Los singletons se construyen de forma perezosa (no al importar) para que
los tests puedan fijar variables de entorno antes de la primera lectura.

Autor: EcoPro
Fecha: 2026-10-02
"""

from __future__ import annotations

from .config_loader import get_settings
from .logging_config import setup_logging
from .settings_codes import SubscriptionCodesSettings, get_codes_settings
from .settings_payments import PaymentsSettings, get_payments_settings

__all__ = [
    "get_settings",
    "setup_logging",
    "SubscriptionCodesSettings",
    "get_codes_settings",
    "PaymentsSettings",
    "get_payments_settings",
]
# Fin del archivo
