# -*- coding: utf-8 -*-
"""
app/modules/billing/errors.py

Errores de billing: firma de webhooks, payloads, montos y procesador.

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

from typing import Optional


class BillingError(Exception):
    http_status: int = 400
    message: str = "Billing error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SignatureInvalid(BillingError):
    """Firma ausente o incorrecta. Se rechaza antes de parsear el body."""
    http_status = 401
    message = "Invalid webhook signature"


class WebhookPayloadError(BillingError):
    http_status = 400
    message = "Malformed webhook payload"


class AmountMismatch(BillingError):
    """
    Monto o moneda distintos al plan. Se registra como ERROR y el webhook
    se confirma igualmente (200) sin mutar nada.
    """
    http_status = 200

    def __init__(self, expected_amount: int, expected_currency: str, amount: int, currency: str):
        self.expected_amount = expected_amount
        self.expected_currency = expected_currency
        self.amount = amount
        self.currency = currency
        super().__init__(
            f"Amount mismatch: expected {expected_amount} {expected_currency}, got {amount} {currency}"
        )


class PaymentProviderError(BillingError):
    http_status = 502
    message = "Payment provider error"


__all__ = [
    "BillingError",
    "SignatureInvalid",
    "WebhookPayloadError",
    "AmountMismatch",
    "PaymentProviderError",
]
