# -*- coding: utf-8 -*-
"""
app/modules/billing/webhooks/events.py

Eventos del webhook del procesador como unión discriminada por `event`.

Los eventos conocidos tienen esquema pydantic estricto; cualquier otro
tipo se conserva como UnknownWebhookEvent (solo se registra en logs).

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import WebhookPayloadError

PAYMENT_COMPLETED = "payment.completed"
PAYMENT_FAILED = "payment.failed"
PAYMENT_CANCELLED = "payment.cancelled"
KNOWN_EVENT_TYPES = frozenset({PAYMENT_COMPLETED, PAYMENT_FAILED, PAYMENT_CANCELLED})


class WebhookMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: Optional[int] = None
    subscription_id: Optional[int] = None


class PaymentEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    session_id: Optional[str] = None
    transaction_id: str = Field(min_length=1, max_length=255)
    amount: int = Field(strict=True, description="Monto en centavos")
    currency: str = Field(min_length=3, max_length=3)
    status: Optional[str] = None
    customer_email: Optional[str] = None
    metadata: WebhookMetadata = Field(default_factory=WebhookMetadata)
    paid_at: Optional[datetime] = None
    error_message: Optional[str] = None


class _PaymentEvent(BaseModel):
    data: PaymentEventData
    timestamp: Optional[datetime] = None


class PaymentCompletedEvent(_PaymentEvent):
    event: Literal["payment.completed"]


class PaymentFailedEvent(_PaymentEvent):
    event: Literal["payment.failed"]


class PaymentCancelledEvent(_PaymentEvent):
    event: Literal["payment.cancelled"]


KnownWebhookEvent = Annotated[
    Union[PaymentCompletedEvent, PaymentFailedEvent, PaymentCancelledEvent],
    Field(discriminator="event"),
]

_known_event_adapter: TypeAdapter[KnownWebhookEvent] = TypeAdapter(KnownWebhookEvent)


@dataclass(frozen=True)
class UnknownWebhookEvent:
    event: str
    raw: dict[str, Any] = field(default_factory=dict)


WebhookEvent = Union[
    PaymentCompletedEvent,
    PaymentFailedEvent,
    PaymentCancelledEvent,
    UnknownWebhookEvent,
]


def parse_webhook_event(raw_body: bytes) -> WebhookEvent:
    """
    Parsea el body crudo (ya verificado) a un evento tipado.

    Raises:
        WebhookPayloadError: body no JSON, no objeto, o evento conocido
            que no cumple su esquema.
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        raise WebhookPayloadError("Webhook body is not valid JSON") from e

    if not isinstance(payload, dict):
        raise WebhookPayloadError("Webhook body must be a JSON object")

    event_type = payload.get("event")
    if not isinstance(event_type, str) or event_type not in KNOWN_EVENT_TYPES:
        return UnknownWebhookEvent(event=str(event_type), raw=payload)

    try:
        return _known_event_adapter.validate_python(payload)
    except ValidationError as e:
        raise WebhookPayloadError(
            f"Invalid {event_type} payload: {e.error_count()} validation error(s)"
        ) from e


__all__ = [
    "PAYMENT_COMPLETED",
    "PAYMENT_FAILED",
    "PAYMENT_CANCELLED",
    "WebhookMetadata",
    "PaymentEventData",
    "PaymentCompletedEvent",
    "PaymentFailedEvent",
    "PaymentCancelledEvent",
    "UnknownWebhookEvent",
    "WebhookEvent",
    "parse_webhook_event",
]
