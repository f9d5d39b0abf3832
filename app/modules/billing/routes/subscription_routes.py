# -*- coding: utf-8 -*-
"""
app/modules/billing/routes/subscription_routes.py

Rutas de suscripción del usuario autenticado.

Endpoints:
- GET  /billing/subscription   fila de suscripción (creación perezosa)
- GET  /billing/check-access   veredicto de acceso
- GET  /billing/payments       historial de pagos (50 más recientes)
- POST /billing/checkout       abre una sesión de pago en el procesador

Autor: EcoPro
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import Principal, get_current_principal
from app.shared.database.database import get_async_session

from ..errors import PaymentProviderError
from ..schemas import (
    AccessResponse,
    CheckoutResponse,
    PaymentHistoryResponse,
    PaymentResponse,
    SubscriptionResponse,
)
from ..services import CheckoutService, SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


def get_subscription_service() -> SubscriptionService:
    return SubscriptionService()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    subscription = await service.get_or_create(session, principal.user_id)
    await session.commit()
    return SubscriptionResponse.model_validate(subscription)


@router.get("/check-access", response_model=AccessResponse, response_model_exclude_none=True)
async def check_access(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: SubscriptionService = Depends(get_subscription_service),
) -> AccessResponse:
    verdict = await service.check_access(session, principal.user_id)
    await session.commit()
    return AccessResponse(**verdict.to_dict())


@router.get("/payments", response_model=PaymentHistoryResponse)
async def list_payments(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: SubscriptionService = Depends(get_subscription_service),
) -> PaymentHistoryResponse:
    payments = await service.list_payments(session, principal.user_id)
    return PaymentHistoryResponse(
        payments=[PaymentResponse.model_validate(p) for p in payments]
    )


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def create_checkout(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    try:
        result = await service.create_checkout(session, principal.user_id, email=principal.email)
    except PaymentProviderError as e:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

    return CheckoutResponse(
        session_token=result.session_token,
        checkout_url=result.checkout_url,
        expires_at=result.expires_at,
        amount_cents=result.amount_cents,
        currency=result.currency,
    )


__all__ = ["router", "get_subscription_service", "get_checkout_service"]
