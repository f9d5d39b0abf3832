# -*- coding: utf-8 -*-
"""
app/modules/billing/models/payment.py

Modelo ORM para la tabla payments (ledger de transacciones del procesador).

transaction_id es la clave natural de deduplicación: un webhook repetido
encuentra la fila existente y no vuelve a tocar la suscripción.

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    PENDING_RETRY = "pending_retry"


class Payment(Base):
    """Entrada del ledger por transacción del procesador de pagos."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    transaction_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        doc="ID de transacción del procesador. Clave de idempotencia.",
    )

    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    subscription_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("subscriptions.id", ondelete="SET NULL"),
        nullable=True,
    )

    checkout_session_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("checkout_sessions.id", ondelete="SET NULL"),
        nullable=True,
    )

    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, doc="Monto en centavos.")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="DZD")

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        doc="completed, failed, pending_retry.",
    )

    payment_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_retry_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    provider_response: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
        doc="Payload crudo del webhook.",
    )

    paid_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

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
        Index("ix_payments_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Payment id={self.id} tx={self.transaction_id} status={self.status}>"


__all__ = ["Payment", "PaymentStatus"]
