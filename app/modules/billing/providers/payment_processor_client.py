# -*- coding: utf-8 -*-
"""
app/modules/billing/providers/payment_processor_client.py

Cliente HTTP del procesador de pagos (RedotPay) para abrir sesiones de
checkout.

Autor: EcoPro
Fecha: 2026-10-11
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

from ..errors import PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessorSession:
    session_id: str
    raw: dict[str, Any]


class PaymentProcessorClient:
    """
    POST {api_url}/checkout/sessions con API key Bearer.

    Args:
        settings: PaymentsSettings (default: singleton)
        transport: transporte httpx opcional (httpx.MockTransport en tests)
    """

    def __init__(
        self,
        settings: Optional[PaymentsSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_payments_settings()
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key is not None:
            headers["Authorization"] = f"Bearer {self.settings.api_key.get_secret_value()}"
        return headers

    async def create_checkout_session(
        self,
        *,
        amount_cents: int,
        currency: str,
        customer_email: Optional[str],
        description: str,
        metadata: dict[str, Any],
        success_url: str,
        cancel_url: str,
    ) -> ProcessorSession:
        body = {
            "amount": amount_cents,
            "currency": currency,
            "customer_email": customer_email or "",
            "description": description,
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        url = f"{self.settings.api_url.rstrip('/')}/checkout/sessions"

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.api_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=body, headers=self._headers())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Payment processor rejected checkout session: status=%s body=%s",
                e.response.status_code,
                e.response.text[:500],
            )
            raise PaymentProviderError(f"Processor returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Payment processor request failed: %s", e)
            raise PaymentProviderError("Payment processor unreachable") from e
        except ValueError as e:
            logger.error("Payment processor returned non-JSON response")
            raise PaymentProviderError("Invalid processor response") from e

        session_id = data.get("session_id") if isinstance(data, dict) else None
        if not session_id:
            logger.error("Payment processor response without session_id")
            raise PaymentProviderError("No session_id in processor response")

        return ProcessorSession(session_id=str(session_id), raw=data)


__all__ = ["PaymentProcessorClient", "ProcessorSession"]
