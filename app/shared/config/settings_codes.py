# -*- coding: utf-8 -*-
"""
app/shared/config/settings_codes.py

Configuración del ciclo de vida de códigos de suscripción.

Descripción:
    TTL de códigos emitidos, ventana del rate limiter, reintentos de
    generación, intervalo del sweeper y retención de intentos.
    Variables de entorno con prefijo CODES_.

Autor: EcoPro
Fecha: 2026-10-03
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SubscriptionCodesSettings(BaseSettings):
    """Parámetros de emisión, canje y expiración de códigos."""

    # =========================================================================
    # EMISIÓN
    # =========================================================================

    code_ttl_minutes: int = Field(
        default=60,
        description="Vigencia de un código emitido (1 hora)"
    )

    generation_max_retries: int = Field(
        default=10,
        description="Intentos de generación ante colisión antes de abortar"
    )

    subscription_days_per_code: int = Field(
        default=30,
        description="Días de suscripción que acredita un canje"
    )

    trial_days: int = Field(
        default=30,
        description="Días de prueba al crear la suscripción de forma perezosa"
    )

    expiring_soon_minutes: int = Field(
        default=15,
        description="Umbral para mostrar un código como 'expiring_soon'"
    )

    # =========================================================================
    # RATE LIMIT
    # =========================================================================

    rate_limit_window_seconds: int = Field(
        default=60,
        description="Ventana deslizante para contar intentos"
    )

    rate_limit_max_attempts: int = Field(
        default=5,
        description="Intentos máximos por actor dentro de la ventana"
    )

    # =========================================================================
    # TRANSACCIONES
    # =========================================================================

    transaction_timeout_seconds: float = Field(
        default=5.0,
        description="Límite de tiempo para la transacción de canje"
    )

    # =========================================================================
    # SWEEPER
    # =========================================================================

    sweep_enabled: bool = Field(
        default=True,
        description="Registra el sweeper de expiración al arrancar"
    )

    sweep_interval_seconds: int = Field(
        default=30,
        description="Intervalo entre ejecuciones del sweeper"
    )

    attempt_retention_hours: int = Field(
        default=24,
        description="Antigüedad a partir de la cual se purgan intentos"
    )

    model_config = SettingsConfigDict(
        env_prefix="CODES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_codes_settings: Optional[SubscriptionCodesSettings] = None


def get_codes_settings() -> SubscriptionCodesSettings:
    """Obtiene la instancia global de configuración de códigos."""
    global _codes_settings
    if _codes_settings is None:
        _codes_settings = SubscriptionCodesSettings()
    return _codes_settings


__all__ = [
    "SubscriptionCodesSettings",
    "get_codes_settings",
]

# Fin del archivo app/shared/config/settings_codes.py
