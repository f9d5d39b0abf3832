# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/jobs/expiry_sweeper.py

Sweeper periódico de códigos vencidos.

Cada tick:
1. UPDATE masivo issued -> expired de códigos con expiry_date < now (commit)
2. Notificación en el chat de cada código expirado, best-effort y en su
   propia transacción: un fallo se registra y no deshace la expiración
3. Poda de intentos de validación fuera de retención y expiración de
   checkout sessions pending vencidas (commit; un fallo se registra)

El sweeper es un handle propio creado en el lifespan de la app y
guardado en app.state. run_once() ejecuta un tick determinista (tests y
endpoint interno de limpieza).

Autor: EcoPro
Fecha: 2026-10-10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.billing.repositories import CheckoutSessionRepository
from app.modules.chat import ChatMessageSink, MessageType, SenderType
from app.shared.config.settings_codes import get_codes_settings
from app.shared.scheduler import SchedulerService
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..metrics import codes_expired_total
from ..repositories import CodeRequestRepository, ExpiredCode, ValidationAttemptRepository

logger = logging.getLogger(__name__)

EXPIRY_SWEEP_JOB_ID = "subscription_codes_expiry_sweep"
EXPIRED_CODE_MESSAGE = "Code has expired. A new code needs to be issued."


@dataclass(frozen=True)
class SweepResult:
    expired: int = 0
    notified: int = 0
    pruned_attempts: int = 0
    expired_checkouts: int = 0


class CodeExpirySweeper:
    """
    Handle del job de expiración.

    Args:
        session_factory: async_sessionmaker (una sesión por fase)
        scheduler: SchedulerService donde se registra el job
        sink: sink de mensajes de chat para las notificaciones
        interval_seconds: intervalo entre ticks
        attempt_retention: antigüedad a partir de la cual se podan intentos
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        scheduler: SchedulerService,
        sink: Optional[ChatMessageSink] = None,
        interval_seconds: Optional[int] = None,
        attempt_retention: Optional[timedelta] = None,
    ):
        settings = get_codes_settings()
        self.session_factory = session_factory
        self.scheduler = scheduler
        self.sink = sink or ChatMessageSink()
        self.interval_seconds = interval_seconds or settings.sweep_interval_seconds
        self.attempt_retention = attempt_retention or timedelta(hours=settings.attempt_retention_hours)
        self.codes = CodeRequestRepository()
        self.attempts = ValidationAttemptRepository()
        self.checkouts = CheckoutSessionRepository()

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Registra el job en el scheduler (idempotente)."""
        if self.is_running:
            return
        self.scheduler.add_interval_job(
            func=self._tick,
            job_id=EXPIRY_SWEEP_JOB_ID,
            seconds=self.interval_seconds,
        )
        logger.info("Code expiry sweeper started: every %ds", self.interval_seconds)

    def stop(self) -> None:
        if self.scheduler.remove_job(EXPIRY_SWEEP_JOB_ID):
            logger.info("Code expiry sweeper stopped")

    @property
    def is_running(self) -> bool:
        return self.scheduler.has_job(EXPIRY_SWEEP_JOB_ID)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def _tick(self) -> None:
        try:
            await self.run_once()
        except SQLAlchemyError as exc:
            # El siguiente tick reintenta; no hay estado entre ticks
            logger.error("Code expiry sweep failed: %s", exc)

    async def run_once(self, now: Optional[datetime] = None) -> SweepResult:
        now = ensure_utc(now) if now else utcnow()

        async with self.session_factory() as session:
            try:
                expired_codes = await self.codes.expire_stale(session, now)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        # Las filas ya están expired: el siguiente tick no las devuelve
        notified = 0
        for expired in expired_codes:
            if await self._notify(expired, now):
                notified += 1

        if expired_codes:
            codes_expired_total.inc(len(expired_codes))
            logger.info(
                "Expired %d subscription codes (notified=%d)",
                len(expired_codes),
                notified,
            )

        pruned, expired_checkouts = await self._housekeeping(now)

        return SweepResult(
            expired=len(expired_codes),
            notified=notified,
            pruned_attempts=pruned,
            expired_checkouts=expired_checkouts,
        )

    async def _housekeeping(self, now: datetime) -> tuple[int, int]:
        """Poda de intentos y expiración de checkouts; un fallo se reintenta en el siguiente tick."""
        async with self.session_factory() as session:
            try:
                pruned = await self.attempts.delete_before(session, now - self.attempt_retention)
                expired_checkouts = await self.checkouts.expire_stale(session, now)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Sweeper housekeeping failed: %s", exc)
                return 0, 0

        if pruned or expired_checkouts:
            logger.info(
                "Pruned %d validation attempts, expired %d checkout sessions",
                pruned,
                expired_checkouts,
            )
        return pruned, expired_checkouts

    async def _notify(self, expired: ExpiredCode, now: datetime) -> bool:
        async with self.session_factory() as session:
            try:
                await self.sink.post(
                    session,
                    expired.chat_id,
                    EXPIRED_CODE_MESSAGE,
                    sender_type=SenderType.SYSTEM,
                    message_type=MessageType.SYSTEM,
                    metadata={"code_request_id": expired.id, "event": "code_expired"},
                    now=now,
                )
                await session.commit()
            except Exception as exc:
                await session.rollback()
                logger.warning(
                    "Expired code notification failed: code_request=%s chat=%s error=%s",
                    expired.id,
                    expired.chat_id,
                    exc,
                )
                return False
        return True


__all__ = [
    "CodeExpirySweeper",
    "SweepResult",
    "EXPIRY_SWEEP_JOB_ID",
    "EXPIRED_CODE_MESSAGE",
]
