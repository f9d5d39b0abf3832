# -*- coding: utf-8 -*-
"""
app/modules/billing/models/subscription.py

Modelo ORM para la tabla subscriptions (una fila por suscriptor).

Autor: EcoPro
Fecha: 2026-10-09
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, Boolean, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime


class SubscriptionStatus(str, Enum):
    """Estados de facturación de un suscriptor."""
    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Subscription(Base):
    """
    Estado de facturación por suscriptor.

    Se crea de forma perezosa al primer acceso con prueba de 30 días.
    La modifican el canje de códigos y la conciliación de webhooks.
    """

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        doc="Suscriptor dueño de la fila (único).",
    )

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SubscriptionStatus.TRIAL.value,
        doc="trial, active, expired, cancelled.",
    )

    trial_started_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    trial_ends_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    current_period_start: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    current_period_end: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

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

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} user={self.user_id} status={self.status}>"


__all__ = ["Subscription", "SubscriptionStatus"]
