# -*- coding: utf-8 -*-
"""
app/modules/billing/webhooks/signature.py

Verificación HMAC-SHA256 de webhooks del procesador.

La firma es el hexdigest HMAC-SHA256 del body crudo con el secreto
compartido, enviada en X-Payment-Signature (alias X-RedotPay-Signature).
Fail-closed: sin secreto configurado ningún webhook es válido.

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping, Optional

from ..errors import SignatureInvalid

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Payment-Signature"
SIGNATURE_HEADER_ALIASES = (SIGNATURE_HEADER, "X-RedotPay-Signature")


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def extract_signature(headers: Mapping[str, str]) -> Optional[str]:
    """Primer header de firma presente (los headers de Starlette no distinguen mayúsculas)."""
    for name in SIGNATURE_HEADER_ALIASES:
        value = headers.get(name)
        if value:
            return value.strip()
    return None


def verify_webhook_signature(
    raw_body: bytes,
    signature: Optional[str],
    secret: Optional[str],
) -> None:
    """
    Raises:
        SignatureInvalid: secreto ausente, firma ausente o firma incorrecta.
    """
    if not secret:
        logger.error("Payment webhook secret not configured; rejecting webhook")
        raise SignatureInvalid("Webhook secret not configured")

    if not signature:
        logger.warning("Payment webhook without signature header")
        raise SignatureInvalid("Missing webhook signature")

    # Bytes: compare_digest no admite str con caracteres no ASCII
    expected = compute_signature(raw_body, secret).encode("ascii")
    received = signature.strip().lower().encode("utf-8", "surrogateescape")
    if not hmac.compare_digest(expected, received):
        logger.warning("Payment webhook signature mismatch")
        raise SignatureInvalid()


__all__ = [
    "SIGNATURE_HEADER",
    "SIGNATURE_HEADER_ALIASES",
    "compute_signature",
    "extract_signature",
    "verify_webhook_signature",
]
