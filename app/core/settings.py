# -*- coding: utf-8 -*-
"""
app/core/settings.py

Fachada de configuración para EcoPro Billing.
Reexpone la carga de settings basada en Pydantic v2 definida en
`app.shared.config`.

Autor: EcoPro
Fecha: 2026-10-02
"""

from typing import cast

from app.shared.config.config_loader import get_settings as _get_settings
from app.shared.config.settings_base import BaseAppSettings


def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración global de la aplicación (según PYTHON_ENV).
    """
    settings = _get_settings()
    return cast(BaseAppSettings, settings)

# Fin del archivo app/core/settings.py
