# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/repositories/validation_attempt_repository.py

Repositorio de code_validation_attempts (insert-only + poda).

Autor: EcoPro
Fecha: 2026-10-08
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..enums import ActorType, AttemptOutcome
from ..models import ValidationAttempt


class ValidationAttemptRepository:

    async def count_since(
        self,
        session: AsyncSession,
        actor_id: int,
        actor_type: ActorType,
        since: datetime,
    ) -> int:
        result = await session.execute(
            select(func.count(ValidationAttempt.id)).where(
                ValidationAttempt.actor_id == actor_id,
                ValidationAttempt.actor_type == actor_type.value,
                ValidationAttempt.created_at > since,
            )
        )
        return int(result.scalar_one())

    async def oldest_since(
        self,
        session: AsyncSession,
        actor_id: int,
        actor_type: ActorType,
        since: datetime,
    ) -> Optional[datetime]:
        result = await session.execute(
            select(func.min(ValidationAttempt.created_at)).where(
                ValidationAttempt.actor_id == actor_id,
                ValidationAttempt.actor_type == actor_type.value,
                ValidationAttempt.created_at > since,
            )
        )
        return result.scalar_one_or_none()

    async def add(
        self,
        session: AsyncSession,
        *,
        actor_id: int,
        actor_type: ActorType,
        attempted_code: str,
        outcome: AttemptOutcome,
        created_at: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ValidationAttempt:
        attempt = ValidationAttempt(
            actor_id=actor_id,
            actor_type=actor_type.value,
            attempted_code=attempted_code[:32],
            outcome=outcome.value,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=created_at,
        )
        session.add(attempt)
        await session.flush()
        return attempt

    async def delete_before(self, session: AsyncSession, cutoff: datetime) -> int:
        result = await session.execute(
            delete(ValidationAttempt)
            .where(ValidationAttempt.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


__all__ = ["ValidationAttemptRepository"]
