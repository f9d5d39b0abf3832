# -*- coding: utf-8 -*-
"""
app/modules/billing/schemas.py

Esquemas Pydantic para el módulo de billing.

Autor: EcoPro
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionResponse(BaseModel):
    """Fila de suscripción del usuario autenticado."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    trial_started_at: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    auto_renew: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AccessResponse(BaseModel):
    has_access: bool
    status: str
    message: str
    days_left: Optional[int] = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_id: str
    amount_cents: int
    currency: str
    status: str
    payment_method: Optional[str] = None
    retry_count: int = 0
    next_retry_at: Optional[datetime] = None
    error_message: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PaymentHistoryResponse(BaseModel):
    payments: list[PaymentResponse] = Field(default_factory=list)


class CheckoutResponse(BaseModel):
    session_token: str = Field(description="Token propio de la sesión de checkout.")
    checkout_url: str = Field(description="Página de pago del procesador.")
    expires_at: datetime
    amount_cents: int
    currency: str


class WebhookAckResponse(BaseModel):
    message: str


__all__ = [
    "SubscriptionResponse",
    "AccessResponse",
    "PaymentResponse",
    "PaymentHistoryResponse",
    "CheckoutResponse",
    "WebhookAckResponse",
]
