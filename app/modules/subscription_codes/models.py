# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/models.py

Modelos ORM para code_requests y code_validation_attempts.

Autor: EcoPro
Fecha: 2026-10-08
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime

from .enums import CodeRequestStatus


class CodeRequest(Base):
    """
    Solicitud de código entre cliente y vendedor.

    El código (generated_code) es NULL mientras la solicitud está pending
    y único en todo el sistema una vez emitido.
    """

    __tablename__ = "code_requests"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    chat_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    client_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    generated_code: Mapped[Optional[str]] = mapped_column(
        String(19),
        nullable=True,
        unique=True,
        doc="Código XXXX-XXXX-XXXX-XXXX. NULL hasta la emisión.",
    )

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=CodeRequestStatus.PENDING.value,
        doc="pending, issued, used, expired.",
    )

    payment_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    seller_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    issued_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    expiry_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    redeemed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    redeemed_by_client_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        # Barrido del sweeper: status='issued' AND expiry_date < now
        Index("ix_code_requests_status_expiry", "status", "expiry_date"),
        Index("ix_code_requests_chat_status", "chat_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<CodeRequest id={self.id} chat={self.chat_id} status={self.status}>"


class ValidationAttempt(Base):
    """Registro de auditoría/rate-limit. Solo inserciones; el sweeper poda."""

    __tablename__ = "code_validation_attempts"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    actor_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    actor_type: Mapped[str] = mapped_column(String(16), nullable=False)
    attempted_code: Mapped[str] = mapped_column(String(32), nullable=False)
    outcome: Mapped[str] = mapped_column(String(16), nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_code_validation_attempts_actor_created", "actor_id", "actor_type", "created_at"),
        Index("ix_code_validation_attempts_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ValidationAttempt actor={self.actor_type}:{self.actor_id} outcome={self.outcome}>"


__all__ = ["CodeRequest", "ValidationAttempt"]
