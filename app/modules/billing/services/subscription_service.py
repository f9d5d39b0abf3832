# -*- coding: utf-8 -*-
"""
app/modules/billing/services/subscription_service.py

Estado de suscripción: creación perezosa, acreditación por canje de
código, activación por pago y verificación de acceso.

Los métodos hacen flush pero no commit; el llamador controla la
transacción para que la suscripción cambie junto con el código o el
pago que la origina.

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_codes import get_codes_settings
from app.shared.config.settings_payments import get_payments_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..models import Payment, Subscription, SubscriptionStatus
from ..repositories import PaymentRepository, SubscriptionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessVerdict:
    has_access: bool
    status: str
    message: str
    days_left: Optional[int] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.days_left is None:
            data.pop("days_left")
        return data


def _days_left(end: datetime, now: datetime) -> int:
    remaining = ensure_utc(end) - now
    return max(0, remaining.days + (1 if remaining.seconds or remaining.microseconds else 0))


class SubscriptionService:
    """
    Operaciones sobre la fila única de suscripción de cada usuario.
    """

    def __init__(
        self,
        repository: Optional[SubscriptionRepository] = None,
        payments: Optional[PaymentRepository] = None,
    ):
        self.repository = repository or SubscriptionRepository()
        self.payments = payments or PaymentRepository()
        self.trial_days = get_codes_settings().trial_days
        self.days_per_code = get_codes_settings().subscription_days_per_code
        self.billing_period_days = get_payments_settings().billing_period_days

    # ------------------------------------------------------------------
    # Lectura / creación perezosa
    # ------------------------------------------------------------------

    async def get_or_create(
        self,
        session: AsyncSession,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Devuelve la suscripción; si no existe crea una de prueba.

        La creación va en un SAVEPOINT: si otra petición la creó en
        paralelo (unique user_id) se relee la fila ganadora.
        """
        subscription = await self.repository.get_by_user(session, user_id)
        if subscription is not None:
            return subscription

        now = ensure_utc(now) if now else utcnow()
        candidate = Subscription(
            user_id=user_id,
            status=SubscriptionStatus.TRIAL.value,
            trial_started_at=now,
            trial_ends_at=now + timedelta(days=self.trial_days),
            auto_renew=False,
            created_at=now,
            updated_at=now,
        )
        try:
            async with session.begin_nested():
                await self.repository.add(session, candidate)
        except IntegrityError:
            logger.info("Subscription for user=%s created concurrently, re-reading", user_id)
            subscription = await self.repository.get_by_user(session, user_id)
            if subscription is None:
                raise
            return subscription

        logger.info("Trial subscription created: user=%s ends=%s", user_id, candidate.trial_ends_at)
        return candidate

    # ------------------------------------------------------------------
    # Mutaciones
    # ------------------------------------------------------------------

    async def credit_code_redemption(
        self,
        session: AsyncSession,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Acredita un periodo por canje de código.

        - sin suscripción: se crea active con periodo now -> now+30d
        - active: current_period_end se extiende 30 días desde su valor
        - cualquier otro estado: active con ventana nueva desde now
        """
        now = ensure_utc(now) if now else utcnow()
        period = timedelta(days=self.days_per_code)
        subscription = await self.repository.get_by_user(session, user_id, for_update=True)

        if subscription is None:
            subscription = Subscription(
                user_id=user_id,
                status=SubscriptionStatus.ACTIVE.value,
                current_period_start=now,
                current_period_end=now + period,
                auto_renew=False,
                created_at=now,
                updated_at=now,
            )
            await self.repository.add(session, subscription)
            logger.info("Subscription activated by code: user=%s end=%s", user_id, subscription.current_period_end)
            return subscription

        if subscription.status == SubscriptionStatus.ACTIVE.value and subscription.current_period_end is not None:
            subscription.current_period_end = ensure_utc(subscription.current_period_end) + period
        else:
            subscription.status = SubscriptionStatus.ACTIVE.value
            subscription.current_period_start = now
            subscription.current_period_end = now + period
        subscription.updated_at = now
        await session.flush()

        logger.info("Subscription credited by code: user=%s end=%s", user_id, subscription.current_period_end)
        return subscription

    async def activate_paid_period(
        self,
        session: AsyncSession,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """Activa un periodo pagado: now -> now+30d con auto_renew."""
        now = ensure_utc(now) if now else utcnow()
        subscription = await self.get_or_create(session, user_id, now=now)

        subscription.status = SubscriptionStatus.ACTIVE.value
        subscription.current_period_start = now
        subscription.current_period_end = now + timedelta(days=self.billing_period_days)
        subscription.auto_renew = True
        subscription.updated_at = now
        await session.flush()

        logger.info("Subscription activated by payment: user=%s end=%s", user_id, subscription.current_period_end)
        return subscription

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    async def check_access(
        self,
        session: AsyncSession,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> AccessVerdict:
        now = ensure_utc(now) if now else utcnow()
        subscription = await self.get_or_create(session, user_id, now=now)

        if subscription.status == SubscriptionStatus.TRIAL.value:
            if subscription.trial_ends_at is not None and ensure_utc(subscription.trial_ends_at) > now:
                return AccessVerdict(
                    has_access=True,
                    status=subscription.status,
                    days_left=_days_left(subscription.trial_ends_at, now),
                    message="Trial period active",
                )
            return AccessVerdict(
                has_access=False,
                status=SubscriptionStatus.EXPIRED.value,
                message="Trial period has ended",
            )

        if subscription.status == SubscriptionStatus.ACTIVE.value:
            end = subscription.current_period_end
            if end is None or ensure_utc(end) > now:
                return AccessVerdict(
                    has_access=True,
                    status=subscription.status,
                    days_left=_days_left(end, now) if end is not None else None,
                    message="Subscription active",
                )
            return AccessVerdict(
                has_access=False,
                status=SubscriptionStatus.EXPIRED.value,
                message="Subscription period has ended",
            )

        return AccessVerdict(
            has_access=False,
            status=subscription.status,
            message="Subscription is not active",
        )

    async def list_payments(self, session: AsyncSession, user_id: int) -> list[Payment]:
        return await self.payments.list_for_user(session, user_id)


__all__ = ["SubscriptionService", "AccessVerdict"]
