# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/repositories/code_request_repository.py

Repositorio de code_requests.

Las transiciones de estado son UPDATE condicionales sobre el estado de
origen (lock optimista): si otra transacción ganó la carrera, el UPDATE
afecta 0 filas y el método devuelve False. Ningún método hace commit.

Autor: EcoPro
Fecha: 2026-10-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..enums import CodeRequestStatus
from ..models import CodeRequest

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


@dataclass(frozen=True)
class ExpiredCode:
    """Fila devuelta por el barrido de expiración."""
    id: int
    chat_id: int
    client_id: int
    generated_code: Optional[str]


class CodeRequestRepository:

    async def get_by_id(self, session: AsyncSession, code_request_id: int) -> Optional[CodeRequest]:
        result = await session.execute(
            select(CodeRequest).where(CodeRequest.id == code_request_id)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, session: AsyncSession, code: str) -> Optional[CodeRequest]:
        """Búsqueda exacta por código canónico."""
        result = await session.execute(
            select(CodeRequest)
            .where(CodeRequest.generated_code == code)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def code_exists(self, session: AsyncSession, code: str) -> bool:
        result = await session.execute(
            select(CodeRequest.id).where(CodeRequest.generated_code == code).limit(1)
        )
        return result.first() is not None

    async def get_pending_for_chat(self, session: AsyncSession, chat_id: int) -> Optional[CodeRequest]:
        result = await session.execute(
            select(CodeRequest)
            .where(
                CodeRequest.chat_id == chat_id,
                CodeRequest.status == CodeRequestStatus.PENDING.value,
            )
            .order_by(CodeRequest.created_at.desc(), CodeRequest.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        session: AsyncSession,
        *,
        chat_id: int,
        client_id: int,
        seller_id: int,
        client_message: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CodeRequest:
        code_request = CodeRequest(
            chat_id=chat_id,
            client_id=client_id,
            seller_id=seller_id,
            client_message=client_message,
            status=CodeRequestStatus.PENDING.value,
        )
        if now is not None:
            code_request.created_at = now
            code_request.updated_at = now
        session.add(code_request)
        await session.flush()
        return code_request

    async def mark_issued(
        self,
        session: AsyncSession,
        code_request_id: int,
        *,
        code: str,
        expiry_date: datetime,
        issued_at: datetime,
        payment_method: str,
        seller_notes: Optional[str] = None,
    ) -> bool:
        """pending -> issued. False si la fila ya no estaba pending."""
        result = await session.execute(
            update(CodeRequest)
            .where(
                CodeRequest.id == code_request_id,
                CodeRequest.status == CodeRequestStatus.PENDING.value,
            )
            .values(
                status=CodeRequestStatus.ISSUED.value,
                generated_code=code,
                expiry_date=expiry_date,
                issued_at=issued_at,
                payment_method=payment_method,
                seller_notes=seller_notes,
                updated_at=issued_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_used(
        self,
        session: AsyncSession,
        code_request_id: int,
        *,
        redeemed_by_client_id: int,
        now: datetime,
    ) -> bool:
        """issued -> used. False si otra redención ganó la carrera."""
        result = await session.execute(
            update(CodeRequest)
            .where(
                CodeRequest.id == code_request_id,
                CodeRequest.status == CodeRequestStatus.ISSUED.value,
            )
            .values(
                status=CodeRequestStatus.USED.value,
                redeemed_at=now,
                redeemed_by_client_id=redeemed_by_client_id,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def expire_stale(self, session: AsyncSession, now: datetime) -> list[ExpiredCode]:
        """
        UPDATE masivo issued -> expired para códigos vencidos.

        Devuelve las filas afectadas para notificar en el chat.
        """
        result = await session.execute(
            update(CodeRequest)
            .where(
                CodeRequest.status == CodeRequestStatus.ISSUED.value,
                CodeRequest.expiry_date < now,
            )
            .values(status=CodeRequestStatus.EXPIRED.value, updated_at=now)
            .returning(
                CodeRequest.id,
                CodeRequest.chat_id,
                CodeRequest.client_id,
                CodeRequest.generated_code,
            )
            .execution_options(synchronize_session=False)
        )
        return [
            ExpiredCode(id=row.id, chat_id=row.chat_id, client_id=row.client_id, generated_code=row.generated_code)
            for row in result.all()
        ]

    async def list_for_client(
        self, session: AsyncSession, client_id: int, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[CodeRequest]:
        result = await session.execute(
            select(CodeRequest)
            .where(CodeRequest.client_id == client_id)
            .order_by(CodeRequest.created_at.desc(), CodeRequest.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_seller(
        self, session: AsyncSession, seller_id: int, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[CodeRequest]:
        result = await session.execute(
            select(CodeRequest)
            .where(CodeRequest.seller_id == seller_id)
            .order_by(CodeRequest.created_at.desc(), CodeRequest.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_status(self, session: AsyncSession, seller_id: int) -> dict[str, int]:
        """Conteo por estado; estados sin filas aparecen con 0."""
        result = await session.execute(
            select(CodeRequest.status, func.count(CodeRequest.id))
            .where(CodeRequest.seller_id == seller_id)
            .group_by(CodeRequest.status)
        )
        counts = {status.value: 0 for status in CodeRequestStatus}
        for status, count in result.all():
            counts[status] = int(count)
        return counts


__all__ = ["CodeRequestRepository", "ExpiredCode"]
