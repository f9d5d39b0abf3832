# -*- coding: utf-8 -*-
"""
app/modules/billing/models/checkout_session.py

Modelo ORM para la tabla checkout_sessions.

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime


class CheckoutSessionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


class CheckoutSession(Base):
    """
    Página de pago abierta en el procesador para un suscriptor.

    Pasa a completed con el webhook payment.completed correspondiente;
    el sweeper expira las pending vencidas.
    """

    __tablename__ = "checkout_sessions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    subscription_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("subscriptions.id", ondelete="SET NULL"),
        nullable=True,
    )

    session_token: Mapped[str] = mapped_column(
        String(80),
        nullable=False,
        unique=True,
        doc="Token propio: 'session_' + 64 hex.",
    )

    processor_session_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        doc="session_id devuelto por el procesador.",
    )

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=CheckoutSessionStatus.PENDING.value,
    )

    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_checkout_sessions_status_expires", "status", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<CheckoutSession id={self.id} user={self.user_id} status={self.status}>"


__all__ = ["CheckoutSession", "CheckoutSessionStatus"]
