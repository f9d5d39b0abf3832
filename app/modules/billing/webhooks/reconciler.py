# -*- coding: utf-8 -*-
"""
app/modules/billing/webhooks/reconciler.py

Conciliación de webhooks del procesador de pagos.

Idempotencia por transaction_id: si ya existe un Payment para la
transacción el evento es un replay (INFO, sin error). El unique
constraint de payments.transaction_id cubre el replay concurrente.

- payment.completed: valida monto/moneda, activa la suscripción, inserta
  el pago y completa la checkout session, todo en una transacción
- payment.failed: registra el fallo o programa el siguiente reintento
- payment.cancelled / desconocidos: se registran y se ignoran

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import get_payments_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..errors import AmountMismatch
from ..metrics import payment_webhooks_total
from ..models import PaymentStatus
from ..repositories import CheckoutSessionRepository, PaymentRepository
from ..services.subscription_service import SubscriptionService
from .events import (
    PaymentCancelledEvent,
    PaymentCompletedEvent,
    PaymentEventData,
    PaymentFailedEvent,
    UnknownWebhookEvent,
    WebhookEvent,
)

logger = logging.getLogger(__name__)

PAYMENT_METHOD = "redotpay"
DEFAULT_FAILURE_MESSAGE = "Payment declined"


def _replay(transaction_id: str) -> Dict[str, Any]:
    logger.info("Payment webhook replay ignored: transaction=%s", transaction_id)
    return {"status": "ignored", "reason": "transaction_replay", "transaction_id": transaction_id}


class PaymentWebhookReconciler:

    def __init__(
        self,
        subscriptions: Optional[SubscriptionService] = None,
        payments: Optional[PaymentRepository] = None,
        checkouts: Optional[CheckoutSessionRepository] = None,
        transaction_timeout_seconds: Optional[float] = None,
    ):
        self.settings = get_payments_settings()
        self.subscriptions = subscriptions or SubscriptionService()
        self.payments = payments or PaymentRepository()
        self.checkouts = checkouts or CheckoutSessionRepository()
        self.transaction_timeout_seconds = (
            transaction_timeout_seconds
            if transaction_timeout_seconds is not None
            else self.settings.webhook_transaction_timeout_seconds
        )

    async def reconcile(
        self,
        session: AsyncSession,
        event: WebhookEvent,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Aplica un evento verificado.

        Returns:
            Dict con status (success|ignored|error) y reason.

        Raises:
            SQLAlchemyError / TimeoutError: fallo del store (rollback hecho);
                la ruta responde 500 para que el procesador reintente.
        """
        now = ensure_utc(now) if now else utcnow()

        if isinstance(event, UnknownWebhookEvent):
            logger.warning("Unknown payment webhook event ignored: %s", event.event)
            payment_webhooks_total.labels(event="unknown", result="ignored").inc()
            return {"status": "ignored", "reason": "unknown_event", "event": event.event}

        if isinstance(event, PaymentCancelledEvent):
            logger.info("Payment cancelled: transaction=%s", event.data.transaction_id)
            payment_webhooks_total.labels(event=event.event, result="ignored").inc()
            return {"status": "ignored", "reason": "payment_cancelled"}

        try:
            async with asyncio.timeout(self.transaction_timeout_seconds):
                if isinstance(event, PaymentCompletedEvent):
                    result = await self._handle_completed(session, event, now)
                else:
                    result = await self._handle_failed(session, event, now)
        except IntegrityError:
            # Otra entrega del mismo transaction_id ganó la carrera
            await session.rollback()
            result = _replay(event.data.transaction_id)
        except (SQLAlchemyError, TimeoutError):
            await session.rollback()
            payment_webhooks_total.labels(event=event.event, result="error").inc()
            logger.exception("Payment webhook reconciliation failed: transaction=%s", event.data.transaction_id)
            raise

        payment_webhooks_total.labels(event=event.event, result=result["status"]).inc()
        return result

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _handle_completed(
        self,
        session: AsyncSession,
        event: PaymentCompletedEvent,
        now: datetime,
    ) -> Dict[str, Any]:
        data = event.data

        if await self.payments.get_by_transaction_id(session, data.transaction_id) is not None:
            await session.rollback()
            return _replay(data.transaction_id)

        if data.amount != self.settings.plan_price_cents or data.currency.upper() != self.settings.currency.upper():
            mismatch = AmountMismatch(
                expected_amount=self.settings.plan_price_cents,
                expected_currency=self.settings.currency,
                amount=data.amount,
                currency=data.currency,
            )
            logger.error("%s (transaction=%s)", mismatch, data.transaction_id)
            await session.rollback()
            return {"status": "error", "reason": "amount_mismatch", "transaction_id": data.transaction_id}

        user_id = await self._resolve_user_id(session, data)
        if user_id is None:
            logger.error("Completed payment without resolvable user: transaction=%s", data.transaction_id)
            await session.rollback()
            return {"status": "error", "reason": "missing_user", "transaction_id": data.transaction_id}

        subscription = await self.subscriptions.activate_paid_period(session, user_id, now=now)

        checkout_session_id = None
        if data.session_id:
            checkout_session_id = await self.checkouts.mark_completed(session, data.session_id, now)
            if checkout_session_id is None:
                existing_checkout = await self.checkouts.get_by_processor_session_id(session, data.session_id)
                checkout_session_id = existing_checkout.id if existing_checkout else None

        payment = await self.payments.create(
            session,
            transaction_id=data.transaction_id,
            user_id=user_id,
            subscription_id=subscription.id,
            checkout_session_id=checkout_session_id,
            amount_cents=data.amount,
            currency=data.currency.upper(),
            status=PaymentStatus.COMPLETED.value,
            payment_method=PAYMENT_METHOD,
            retry_count=0,
            provider_response=data.model_dump(mode="json"),
            paid_at=ensure_utc(data.paid_at or event.timestamp or now),
            created_at=now,
            updated_at=now,
        )
        await session.commit()

        logger.info(
            "Payment completed: transaction=%s user=%s subscription=%s period_end=%s",
            data.transaction_id,
            user_id,
            subscription.id,
            subscription.current_period_end,
        )
        return {
            "status": "success",
            "reason": "subscription_activated",
            "transaction_id": data.transaction_id,
            "payment_id": payment.id,
            "subscription_id": subscription.id,
        }

    async def _handle_failed(
        self,
        session: AsyncSession,
        event: PaymentFailedEvent,
        now: datetime,
    ) -> Dict[str, Any]:
        data = event.data
        next_retry_at = now + timedelta(minutes=self.settings.retry_delay_minutes)

        existing = await self.payments.get_by_transaction_id(session, data.transaction_id)
        if existing is not None:
            if existing.status == PaymentStatus.COMPLETED.value:
                await session.rollback()
                return _replay(data.transaction_id)

            existing.retry_count = (existing.retry_count or 0) + 1
            existing.status = PaymentStatus.PENDING_RETRY.value
            existing.next_retry_at = next_retry_at
            existing.error_message = data.error_message or existing.error_message
            existing.updated_at = now
            await session.commit()

            logger.info(
                "Payment failure retry scheduled: transaction=%s retry_count=%d next_retry_at=%s",
                data.transaction_id,
                existing.retry_count,
                next_retry_at.isoformat(),
            )
            return {
                "status": "success",
                "reason": "retry_scheduled",
                "transaction_id": data.transaction_id,
                "retry_count": existing.retry_count,
            }

        user_id = await self._resolve_user_id(session, data)
        if user_id is None:
            logger.error("Failed payment without resolvable user: transaction=%s", data.transaction_id)
            await session.rollback()
            return {"status": "error", "reason": "missing_user", "transaction_id": data.transaction_id}

        subscription = await self.subscriptions.repository.get_by_user(session, user_id)
        checkout = (
            await self.checkouts.get_by_processor_session_id(session, data.session_id)
            if data.session_id
            else None
        )

        await self.payments.create(
            session,
            transaction_id=data.transaction_id,
            user_id=user_id,
            subscription_id=subscription.id if subscription else None,
            checkout_session_id=checkout.id if checkout else None,
            amount_cents=data.amount,
            currency=data.currency.upper(),
            status=PaymentStatus.FAILED.value,
            payment_method=PAYMENT_METHOD,
            retry_count=1,
            next_retry_at=next_retry_at,
            error_message=data.error_message or DEFAULT_FAILURE_MESSAGE,
            provider_response=data.model_dump(mode="json"),
            created_at=now,
            updated_at=now,
        )
        await session.commit()

        logger.info(
            "Payment failure recorded: transaction=%s user=%s reason=%s",
            data.transaction_id,
            user_id,
            data.error_message or DEFAULT_FAILURE_MESSAGE,
        )
        return {"status": "success", "reason": "failure_recorded", "transaction_id": data.transaction_id}

    async def _resolve_user_id(self, session: AsyncSession, data: PaymentEventData) -> Optional[int]:
        """user_id de metadata; si falta, el dueño de la checkout session."""
        if data.metadata.user_id is not None:
            return data.metadata.user_id
        if data.session_id:
            checkout = await self.checkouts.get_by_processor_session_id(session, data.session_id)
            if checkout is not None:
                return checkout.user_id
        return None


__all__ = ["PaymentWebhookReconciler"]
