# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/services/redemption_service.py

Motor de canje de códigos de suscripción.

Flujo de redeem():
1. Canonicaliza el código (formato inválido -> MalformedCode, sin tocar BD)
2. Rate limit por cliente (excedido -> RateLimited, no se registra)
3. validate(): existe, está issued y no ha vencido
4. El código pertenece al cliente que lo canjea
5. UPDATE condicional issued -> used (0 filas -> CodeAlreadyRedeemed)
6. Acredita la suscripción en la misma transacción
7. Registra el intento success y hace commit

Un fallo de validación hace rollback, registra el intento con su
resultado en una transacción propia y se propaga con attempts_remaining.
Un fallo de BD o timeout se propaga como RedemptionFailed (reintentable).

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.billing.models import Subscription
from app.modules.billing.services.subscription_service import SubscriptionService
from app.shared.config.settings_codes import get_codes_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..enums import ActorType, AttemptOutcome, CodeRequestStatus
from ..errors import (
    CodeAlreadyRedeemed,
    CodeExpired,
    CodeNotFound,
    CodeNotYours,
    CodeWrongState,
    MalformedCode,
    RateLimited,
    RedemptionFailed,
    SubscriptionCodeError,
)
from ..metrics import code_redemptions_total
from ..models import CodeRequest
from ..repositories import CodeRequestRepository
from ..utils.code_generator import canonicalize_code
from .rate_limiter import CodeAttemptRateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    code_request: Optional[CodeRequest] = None
    error: Optional[SubscriptionCodeError] = None


@dataclass(frozen=True)
class RedemptionResult:
    success: bool
    subscription: Subscription
    code_request: CodeRequest
    attempts_remaining: int


class RedemptionService:

    def __init__(
        self,
        codes: Optional[CodeRequestRepository] = None,
        rate_limiter: Optional[CodeAttemptRateLimiter] = None,
        subscriptions: Optional[SubscriptionService] = None,
        transaction_timeout_seconds: Optional[float] = None,
    ):
        self.codes = codes or CodeRequestRepository()
        self.rate_limiter = rate_limiter or CodeAttemptRateLimiter()
        self.subscriptions = subscriptions or SubscriptionService()
        self.transaction_timeout_seconds = (
            transaction_timeout_seconds
            if transaction_timeout_seconds is not None
            else get_codes_settings().transaction_timeout_seconds
        )

    async def validate(
        self,
        session: AsyncSession,
        code: str,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Verifica un código sin modificar nada.

        El formato se comprueba antes de cualquier acceso a la BD.
        """
        try:
            canonical = canonicalize_code(code)
        except MalformedCode as exc:
            return ValidationResult(valid=False, error=exc)

        now = ensure_utc(now) if now else utcnow()
        code_request = await self.codes.get_by_code(session, canonical)
        if code_request is None:
            return ValidationResult(valid=False, error=CodeNotFound())

        if code_request.status != CodeRequestStatus.ISSUED.value:
            return ValidationResult(valid=False, code_request=code_request, error=CodeWrongState())

        # Expiración perezosa: el sweeper puede no haber pasado todavía
        if code_request.expiry_date is None or now > ensure_utc(code_request.expiry_date):
            return ValidationResult(valid=False, code_request=code_request, error=CodeExpired())

        return ValidationResult(valid=True, code_request=code_request)

    async def redeem(
        self,
        session: AsyncSession,
        code: str,
        subscriber_id: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RedemptionResult:
        canonical = canonicalize_code(code)
        now = ensure_utc(now) if now else utcnow()

        try:
            limit = await self.rate_limiter.check_limit(session, subscriber_id, ActorType.CLIENT, now=now)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("Rate limit check failed for client=%s: %s", subscriber_id, exc)
            code_redemptions_total.labels(outcome="failed").inc()
            raise RedemptionFailed() from exc

        if not limit.allowed:
            await session.rollback()
            code_redemptions_total.labels(outcome="rate_limited").inc()
            raise RateLimited(reset_in=limit.reset_in_seconds)

        attempts_remaining = self.rate_limiter.remaining_after_record(limit)

        try:
            async with asyncio.timeout(self.transaction_timeout_seconds):
                code_request, subscription = await self._redeem_in_transaction(
                    session,
                    canonical,
                    subscriber_id,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    now=now,
                )
        except SubscriptionCodeError as exc:
            await session.rollback()
            await self._record_failure(session, subscriber_id, canonical, exc, ip_address, user_agent, now)
            exc.attempts_remaining = attempts_remaining
            raise
        except (SQLAlchemyError, TimeoutError) as exc:
            await session.rollback()
            logger.error("Code redemption failed for client=%s: %r", subscriber_id, exc)
            code_redemptions_total.labels(outcome="failed").inc()
            raise RedemptionFailed() from exc

        code_redemptions_total.labels(outcome=AttemptOutcome.SUCCESS.value).inc()
        logger.info(
            "Code redeemed: code_request=%s client=%s period_end=%s",
            code_request.id,
            subscriber_id,
            subscription.current_period_end,
        )
        return RedemptionResult(
            success=True,
            subscription=subscription,
            code_request=code_request,
            attempts_remaining=attempts_remaining,
        )

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    async def _redeem_in_transaction(
        self,
        session: AsyncSession,
        canonical: str,
        subscriber_id: int,
        *,
        ip_address: Optional[str],
        user_agent: Optional[str],
        now: datetime,
    ) -> tuple[CodeRequest, Subscription]:
        result = await self.validate(session, canonical, now=now)
        if not result.valid:
            raise result.error

        code_request = result.code_request
        if code_request.client_id != subscriber_id:
            raise CodeNotYours()

        if not await self.codes.mark_used(session, code_request.id, redeemed_by_client_id=subscriber_id, now=now):
            raise CodeAlreadyRedeemed()
        await session.refresh(code_request)

        subscription = await self.subscriptions.credit_code_redemption(session, subscriber_id, now=now)

        await self.rate_limiter.record_attempt(
            session,
            subscriber_id,
            ActorType.CLIENT,
            canonical,
            AttemptOutcome.SUCCESS,
            ip_address=ip_address,
            user_agent=user_agent,
            now=now,
        )
        await session.commit()
        return code_request, subscription

    async def _record_failure(
        self,
        session: AsyncSession,
        subscriber_id: int,
        canonical: str,
        exc: SubscriptionCodeError,
        ip_address: Optional[str],
        user_agent: Optional[str],
        now: datetime,
    ) -> None:
        outcome = exc.attempt_outcome or AttemptOutcome.INVALID
        code_redemptions_total.labels(outcome=outcome.value).inc()
        logger.info("Code redemption rejected: client=%s outcome=%s", subscriber_id, outcome.value)
        try:
            await self.rate_limiter.record_attempt(
                session,
                subscriber_id,
                ActorType.CLIENT,
                canonical,
                outcome,
                ip_address=ip_address,
                user_agent=user_agent,
                now=now,
            )
            await session.commit()
        except SQLAlchemyError as record_exc:
            await session.rollback()
            logger.error("Could not record redemption attempt for client=%s: %s", subscriber_id, record_exc)
            raise RedemptionFailed() from record_exc


__all__ = ["ValidationResult", "RedemptionResult", "RedemptionService"]
