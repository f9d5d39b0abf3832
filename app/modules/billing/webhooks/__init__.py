# -*- coding: utf-8 -*-
"""
app/modules/billing/webhooks/__init__.py

Webhooks del procesador: firma, eventos tipados y conciliación.
"""

from .events import (
    PaymentCancelledEvent,
    PaymentCompletedEvent,
    PaymentFailedEvent,
    UnknownWebhookEvent,
    WebhookEvent,
    parse_webhook_event,
)
from .reconciler import PaymentWebhookReconciler
from .signature import (
    SIGNATURE_HEADER,
    compute_signature,
    extract_signature,
    verify_webhook_signature,
)

__all__ = [
    "PaymentCompletedEvent",
    "PaymentFailedEvent",
    "PaymentCancelledEvent",
    "UnknownWebhookEvent",
    "WebhookEvent",
    "parse_webhook_event",
    "PaymentWebhookReconciler",
    "SIGNATURE_HEADER",
    "compute_signature",
    "extract_signature",
    "verify_webhook_signature",
]
