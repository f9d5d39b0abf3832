# -*- coding: utf-8 -*-
"""
app/shared/config/settings_payments.py

Configuración del procesador de pagos (checkout + webhooks) para EcoPro.

Descripción:
    Centraliza precio del plan, moneda, secretos de webhook, endpoints del
    procesador y política de reintentos para pagos fallidos.
    Variables de entorno con prefijo PAYMENTS_.

Autor: EcoPro
Fecha: 2026-10-03
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración de pagos con el procesador externo."""

    # =========================================================================
    # PLAN
    # =========================================================================

    plan_price_cents: int = Field(
        default=700,
        description="Precio mensual del plan en centavos (700 = 7.00)"
    )

    currency: str = Field(
        default="DZD",
        description="Moneda del plan (ISO 4217)"
    )

    billing_period_days: int = Field(
        default=30,
        description="Duración del periodo pagado (1 mes = 30 días)"
    )

    # =========================================================================
    # WEBHOOKS
    # =========================================================================

    webhook_secret: Optional[SecretStr] = Field(
        default=None,
        description="Secreto compartido para HMAC-SHA256 del body crudo"
    )

    webhook_transaction_timeout_seconds: float = Field(
        default=5.0,
        description="Límite de tiempo para la transacción de conciliación"
    )

    retry_delay_minutes: int = Field(
        default=60,
        description="Retraso fijo antes de reintentar un cobro fallido"
    )

    # =========================================================================
    # API DEL PROCESADOR (checkout)
    # =========================================================================

    api_url: str = Field(
        default="https://api.redotpay.com/v1",
        description="URL base de la API del procesador"
    )

    api_key: Optional[SecretStr] = Field(
        default=None,
        description="API key (Bearer) del procesador"
    )

    api_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout HTTP hacia el procesador"
    )

    checkout_base_url: str = Field(
        default="https://checkout.redotpay.com/pay",
        description="URL pública de la página de pago"
    )

    checkout_ttl_minutes: int = Field(
        default=30,
        description="Vigencia de una sesión de checkout"
    )

    success_url: str = Field(
        default="https://ecopro.com/billing/success",
        description="Redirect tras pago exitoso"
    )

    cancel_url: str = Field(
        default="https://ecopro.com/billing/cancelled",
        description="Redirect si el usuario cancela"
    )

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
]

# Fin del archivo app/shared/config/settings_payments.py
