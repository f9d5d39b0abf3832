# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/services/issuance_service.py

Lado vendedor/cliente del ciclo de códigos:
- request_code: el cliente pide un código en una conversación
- issue_code: el vendedor confirma el pago y emite el código
- listados y estadísticas por vendedor

Autor: EcoPro
Fecha: 2026-10-10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.chat import ChatMessageSink, MessageType, SenderType
from app.shared.config.settings_codes import get_codes_settings
from app.shared.utils.datetime_helpers import ensure_utc, to_iso8601, utcnow

from ..enums import CodeRequestStatus
from ..errors import (
    AlreadyFinalized,
    ChatNotFound,
    CodeRequestNotFound,
    CodeWrongState,
    GenerationExhausted,
    IssuanceFailed,
)
from ..metrics import codes_issued_total
from ..models import CodeRequest
from ..repositories import CodeRequestRepository
from ..utils.code_generator import generate_unique_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueResult:
    code: str
    expires_at: datetime
    code_request: CodeRequest


@dataclass(frozen=True)
class SellerCodeStats:
    pending: int
    issued: int
    used: int
    expired: int
    total: int
    redemption_rate: float


def format_ttl(minutes: int) -> str:
    """60 -> '1 hour', 120 -> '2 hours', 30 -> '30 minutes'."""
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def build_code_message(code: str, ttl_minutes: int, payment_method: str) -> str:
    return (
        f"Your subscription code is: {code}\n\n"
        f"Code expires in: {format_ttl(ttl_minutes)}\n\n"
        f"Payment method: {payment_method}"
    )


class IssuanceService:

    def __init__(
        self,
        codes: Optional[CodeRequestRepository] = None,
        sink: Optional[ChatMessageSink] = None,
        code_ttl_minutes: Optional[int] = None,
        max_retries: Optional[int] = None,
    ):
        settings = get_codes_settings()
        self.codes = codes or CodeRequestRepository()
        self.sink = sink or ChatMessageSink()
        self.code_ttl_minutes = code_ttl_minutes or settings.code_ttl_minutes
        self.max_retries = max_retries or settings.generation_max_retries

    # ------------------------------------------------------------------
    # Cliente
    # ------------------------------------------------------------------

    async def request_code(
        self,
        session: AsyncSession,
        chat_id: int,
        client_id: int,
        message: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[CodeRequest, bool]:
        """
        Crea una solicitud pending para la conversación.

        Idempotente: si ya hay una pending se devuelve sin crear nada.

        Returns:
            (code_request, created)
        """
        now = ensure_utc(now) if now else utcnow()
        chat = await self.sink.get_chat(session, chat_id)
        if chat is None or chat.client_id != client_id:
            raise ChatNotFound()

        existing = await self.codes.get_pending_for_chat(session, chat_id)
        if existing is not None:
            return existing, False

        try:
            code_request = await self.codes.create(
                session,
                chat_id=chat.id,
                client_id=chat.client_id,
                seller_id=chat.seller_id,
                client_message=message,
                now=now,
            )
            await self.sink.post(
                session,
                chat.id,
                message or "Subscription code requested.",
                sender_type=SenderType.CLIENT,
                sender_id=client_id,
                message_type=MessageType.CODE_REQUEST,
                metadata={"code_request_id": code_request.id},
                now=now,
            )
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("Code request failed for chat=%s: %s", chat_id, exc)
            raise IssuanceFailed() from exc

        logger.info("Code requested: code_request=%s chat=%s client=%s", code_request.id, chat_id, client_id)
        return code_request, True

    # ------------------------------------------------------------------
    # Vendedor
    # ------------------------------------------------------------------

    async def issue_code(
        self,
        session: AsyncSession,
        code_request_id: int,
        seller_id: int,
        payment_method: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> IssueResult:
        now = ensure_utc(now) if now else utcnow()

        code_request = await self.codes.get_by_id(session, code_request_id)
        if code_request is None or code_request.seller_id != seller_id:
            raise CodeRequestNotFound()

        if CodeRequestStatus(code_request.status).is_terminal:
            raise AlreadyFinalized()
        if code_request.status != CodeRequestStatus.PENDING.value:
            raise CodeWrongState(http_status=409)

        try:
            code = await generate_unique_code(
                lambda candidate: self.codes.code_exists(session, candidate),
                max_retries=self.max_retries,
            )
            expires_at = now + timedelta(minutes=self.code_ttl_minutes)

            issued = await self.codes.mark_issued(
                session,
                code_request.id,
                code=code,
                expiry_date=expires_at,
                issued_at=now,
                payment_method=payment_method,
                seller_notes=notes,
            )
            if not issued:
                raise CodeWrongState(http_status=409)

            await self.sink.post(
                session,
                code_request.chat_id,
                build_code_message(code, self.code_ttl_minutes, payment_method),
                sender_type=SenderType.SELLER,
                sender_id=seller_id,
                message_type=MessageType.CODE_RESPONSE,
                metadata={
                    "code_request_id": code_request.id,
                    "code": code,
                    "expires_at": to_iso8601(expires_at),
                    "payment_method": payment_method,
                },
                now=now,
            )
            await session.refresh(code_request)
            await session.commit()
        except (CodeWrongState, GenerationExhausted):
            await session.rollback()
            raise
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("Code issuance failed for code_request=%s: %s", code_request_id, exc)
            raise IssuanceFailed() from exc

        codes_issued_total.inc()
        logger.info(
            "Code issued: code_request=%s seller=%s expires_at=%s",
            code_request.id,
            seller_id,
            expires_at.isoformat(),
        )
        return IssueResult(code=code, expires_at=expires_at, code_request=code_request)

    # ------------------------------------------------------------------
    # Listados
    # ------------------------------------------------------------------

    async def list_codes_for_client(self, session: AsyncSession, client_id: int) -> list[CodeRequest]:
        return await self.codes.list_for_client(session, client_id)

    async def list_codes_for_seller(self, session: AsyncSession, seller_id: int) -> list[CodeRequest]:
        return await self.codes.list_for_seller(session, seller_id)

    async def seller_code_stats(self, session: AsyncSession, seller_id: int) -> SellerCodeStats:
        counts = await self.codes.count_by_status(session, seller_id)
        used = counts[CodeRequestStatus.USED.value]
        expired = counts[CodeRequestStatus.EXPIRED.value]
        finished = used + expired
        return SellerCodeStats(
            pending=counts[CodeRequestStatus.PENDING.value],
            issued=counts[CodeRequestStatus.ISSUED.value],
            used=used,
            expired=expired,
            total=sum(counts.values()),
            redemption_rate=round(used / finished, 4) if finished else 0.0,
        )


__all__ = [
    "IssueResult",
    "SellerCodeStats",
    "IssuanceService",
    "format_ttl",
    "build_code_message",
]
