# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/services/rate_limiter.py

Rate limiter de intentos de canje con ventana deslizante.

Cuenta filas de code_validation_attempts del actor dentro de la ventana.
El patrón check-then-record no es atómico: dos peticiones simultáneas
pueden pasar ambas el límite. Es un límite best-effort.

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_codes import get_codes_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..enums import ActorType, AttemptOutcome
from ..repositories import ValidationAttemptRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    attempts_remaining: int
    reset_in_seconds: int
    current_count: int
    limit: int


class CodeAttemptRateLimiter:
    """
    Límite de intentos por (actor_id, actor_type).

    Args:
        max_attempts: intentos permitidos en la ventana (default settings)
        window_seconds: tamaño de la ventana (default settings)
        repository: repositorio de intentos (inyectable en tests)
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        window_seconds: Optional[int] = None,
        repository: Optional[ValidationAttemptRepository] = None,
    ):
        settings = get_codes_settings()
        self.max_attempts = max_attempts if max_attempts is not None else settings.rate_limit_max_attempts
        self.window_seconds = window_seconds if window_seconds is not None else settings.rate_limit_window_seconds
        self.repository = repository or ValidationAttemptRepository()

    @property
    def window(self) -> timedelta:
        return timedelta(seconds=self.window_seconds)

    async def check_limit(
        self,
        session: AsyncSession,
        actor_id: int,
        actor_type: ActorType,
        now: Optional[datetime] = None,
    ) -> RateLimitResult:
        now = ensure_utc(now) if now else utcnow()
        since = now - self.window

        count = await self.repository.count_since(session, actor_id, actor_type, since)
        reset_in = 0
        if count:
            oldest = await self.repository.oldest_since(session, actor_id, actor_type, since)
            if oldest is not None:
                remaining = (ensure_utc(oldest) + self.window - now).total_seconds()
                reset_in = max(0, math.ceil(remaining))

        allowed = count < self.max_attempts
        if not allowed:
            logger.info(
                "Code attempt rate limit hit: actor=%s:%s count=%d reset_in=%ds",
                actor_type.value,
                actor_id,
                count,
                reset_in,
            )

        return RateLimitResult(
            allowed=allowed,
            attempts_remaining=max(0, self.max_attempts - count),
            reset_in_seconds=reset_in,
            current_count=count,
            limit=self.max_attempts,
        )

    async def record_attempt(
        self,
        session: AsyncSession,
        actor_id: int,
        actor_type: ActorType,
        attempted_code: str,
        outcome: AttemptOutcome,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """Inserta el intento (flush, sin commit: la transacción es del llamador)."""
        await self.repository.add(
            session,
            actor_id=actor_id,
            actor_type=actor_type,
            attempted_code=attempted_code,
            outcome=outcome,
            created_at=ensure_utc(now) if now else utcnow(),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    def remaining_after_record(self, result: RateLimitResult) -> int:
        """Intentos restantes una vez registrado el intento actual."""
        return max(0, result.limit - (result.current_count + 1))


__all__ = ["RateLimitResult", "CodeAttemptRateLimiter"]
