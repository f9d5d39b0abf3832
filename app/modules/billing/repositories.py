# -*- coding: utf-8 -*-
"""
app/modules/billing/repositories.py

Repositorios de subscriptions, payments y checkout_sessions.

Ningún método hace commit: la transacción pertenece al servicio que
orquesta la operación (canje, conciliación, checkout).

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    CheckoutSession,
    CheckoutSessionStatus,
    Payment,
    Subscription,
)

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_HISTORY_LIMIT = 50


class SubscriptionRepository:

    async def get_by_user(
        self,
        session: AsyncSession,
        user_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[Subscription]:
        """
        Suscripción del usuario.

        for_update=True bloquea la fila (SELECT ... FOR UPDATE en Postgres)
        para extender el periodo sin carreras.
        """
        stmt = select(Subscription).where(Subscription.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def add(self, session: AsyncSession, subscription: Subscription) -> Subscription:
        session.add(subscription)
        await session.flush()
        return subscription


class PaymentRepository:

    async def get_by_transaction_id(
        self,
        session: AsyncSession,
        transaction_id: str,
    ) -> Optional[Payment]:
        result = await session.execute(
            select(Payment)
            .where(Payment.transaction_id == transaction_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, session: AsyncSession, **fields: Any) -> Payment:
        payment = Payment(**fields)
        session.add(payment)
        await session.flush()
        return payment

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: int,
        limit: int = DEFAULT_PAYMENT_HISTORY_LIMIT,
    ) -> list[Payment]:
        result = await session.execute(
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


class CheckoutSessionRepository:

    async def create(self, session: AsyncSession, **fields: Any) -> CheckoutSession:
        checkout = CheckoutSession(**fields)
        session.add(checkout)
        await session.flush()
        return checkout

    async def get_by_processor_session_id(
        self,
        session: AsyncSession,
        processor_session_id: str,
    ) -> Optional[CheckoutSession]:
        result = await session.execute(
            select(CheckoutSession).where(
                CheckoutSession.processor_session_id == processor_session_id
            )
        )
        return result.scalar_one_or_none()

    async def mark_completed(
        self,
        session: AsyncSession,
        processor_session_id: str,
        now: datetime,
    ) -> Optional[int]:
        """pending -> completed. Devuelve el id de la sesión o None."""
        result = await session.execute(
            update(CheckoutSession)
            .where(
                CheckoutSession.processor_session_id == processor_session_id,
                CheckoutSession.status == CheckoutSessionStatus.PENDING.value,
            )
            .values(status=CheckoutSessionStatus.COMPLETED.value, completed_at=now)
            .returning(CheckoutSession.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def expire_stale(self, session: AsyncSession, now: datetime) -> int:
        result = await session.execute(
            update(CheckoutSession)
            .where(
                CheckoutSession.status == CheckoutSessionStatus.PENDING.value,
                CheckoutSession.expires_at < now,
            )
            .values(status=CheckoutSessionStatus.EXPIRED.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


__all__ = [
    "SubscriptionRepository",
    "PaymentRepository",
    "CheckoutSessionRepository",
]
