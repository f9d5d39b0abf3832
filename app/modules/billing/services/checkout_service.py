# -*- coding: utf-8 -*-
"""
app/modules/billing/services/checkout_service.py

Apertura de sesiones de checkout en el procesador de pagos.

Flujo:
1. Asegura la suscripción del usuario (creación perezosa)
2. Genera session_token propio ('session_' + 64 hex)
3. Llama al procesador (POST /checkout/sessions)
4. Persiste checkout_sessions en estado pending (expira en 30 min)

El webhook payment.completed marca la sesión como completed.

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import get_payments_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..models import CheckoutSessionStatus
from ..providers import PaymentProcessorClient
from ..repositories import CheckoutSessionRepository
from .subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

CHECKOUT_DESCRIPTION = "EcoPro monthly subscription"


def generate_session_token() -> str:
    return "session_" + secrets.token_hex(32)


@dataclass(frozen=True)
class CheckoutResult:
    session_token: str
    checkout_url: str
    expires_at: datetime
    amount_cents: int
    currency: str
    processor_session_id: str


class CheckoutService:

    def __init__(
        self,
        client: Optional[PaymentProcessorClient] = None,
        subscriptions: Optional[SubscriptionService] = None,
        repository: Optional[CheckoutSessionRepository] = None,
    ):
        self.settings = get_payments_settings()
        self.client = client or PaymentProcessorClient(self.settings)
        self.subscriptions = subscriptions or SubscriptionService()
        self.repository = repository or CheckoutSessionRepository()

    async def create_checkout(
        self,
        session: AsyncSession,
        user_id: int,
        email: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutResult:
        now = ensure_utc(now) if now else utcnow()
        subscription = await self.subscriptions.get_or_create(session, user_id, now=now)

        session_token = generate_session_token()
        expires_at = now + timedelta(minutes=self.settings.checkout_ttl_minutes)

        # Errores del procesador (PaymentProviderError) se propagan tal cual
        processor_session = await self.client.create_checkout_session(
            amount_cents=self.settings.plan_price_cents,
            currency=self.settings.currency,
            customer_email=email,
            description=CHECKOUT_DESCRIPTION,
            metadata={
                "user_id": user_id,
                "subscription_id": subscription.id,
                "type": "subscription_renewal",
            },
            success_url=f"{self.settings.success_url}?session={session_token}",
            cancel_url=self.settings.cancel_url,
        )

        await self.repository.create(
            session,
            user_id=user_id,
            subscription_id=subscription.id,
            session_token=session_token,
            processor_session_id=processor_session.session_id,
            status=CheckoutSessionStatus.PENDING.value,
            amount_cents=self.settings.plan_price_cents,
            currency=self.settings.currency,
            expires_at=expires_at,
            created_at=now,
        )
        await session.commit()

        checkout_url = f"{self.settings.checkout_base_url.rstrip('/')}/{processor_session.session_id}"
        logger.info(
            "Checkout session created: user=%s processor_session=%s expires_at=%s",
            user_id,
            processor_session.session_id,
            expires_at.isoformat(),
        )
        return CheckoutResult(
            session_token=session_token,
            checkout_url=checkout_url,
            expires_at=expires_at,
            amount_cents=self.settings.plan_price_cents,
            currency=self.settings.currency,
            processor_session_id=processor_session.session_id,
        )


__all__ = ["CheckoutService", "CheckoutResult", "generate_session_token"]
