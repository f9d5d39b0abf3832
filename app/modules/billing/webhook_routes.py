# -*- coding: utf-8 -*-
"""
app/modules/billing/webhook_routes.py

Webhook del procesador de pagos.

Endpoint:
- POST /webhook/payment-processor

Respuestas:
- 401 firma ausente/incorrecta (antes de parsear el body)
- 400 body no JSON o evento conocido con esquema inválido
- 500 fallo del store (el procesador reintenta; la idempotencia lo hace seguro)
- 200 {"message": ...} en cualquier otro caso, incluidos replays,
  montos no coincidentes y eventos desconocidos

Autor: EcoPro
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.database import get_async_session

from .errors import SignatureInvalid, WebhookPayloadError
from .metrics import payment_webhooks_total
from .schemas import WebhookAckResponse
from .webhooks import (
    PaymentWebhookReconciler,
    extract_signature,
    parse_webhook_event,
    verify_webhook_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing:webhooks"])

_ACK_MESSAGES = {
    "success": "Webhook processed",
    "ignored": "Webhook acknowledged",
    "error": "Webhook acknowledged with errors",
}


def get_webhook_reconciler() -> PaymentWebhookReconciler:
    return PaymentWebhookReconciler()


@router.post(
    "/webhook/payment-processor",
    response_model=WebhookAckResponse,
    status_code=status.HTTP_200_OK,
)
async def payment_processor_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    reconciler: PaymentWebhookReconciler = Depends(get_webhook_reconciler),
) -> WebhookAckResponse:
    raw_body = await request.body()
    secret = get_payments_settings().webhook_secret

    try:
        verify_webhook_signature(
            raw_body,
            extract_signature(request.headers),
            secret.get_secret_value() if secret else None,
        )
    except SignatureInvalid as e:
        payment_webhooks_total.labels(event="unverified", result="rejected").inc()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    try:
        event = parse_webhook_event(raw_body)
    except WebhookPayloadError as e:
        logger.warning("Malformed payment webhook: %s", e.message)
        payment_webhooks_total.labels(event="malformed", result="rejected").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    logger.info("Payment webhook received: event=%s", event.event)

    try:
        result = await reconciler.reconcile(session, event)
    except (SQLAlchemyError, TimeoutError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook processing error",
        ) from e

    return WebhookAckResponse(message=_ACK_MESSAGES.get(result["status"], "Webhook acknowledged"))


__all__ = ["router", "get_webhook_reconciler"]
