# -*- coding: utf-8 -*-
"""
Tests para CheckoutService y PaymentProcessorClient con httpx.MockTransport.
"""

import json
from datetime import timedelta

import httpx
import pytest
from sqlalchemy import select

from app.modules.billing.errors import PaymentProviderError
from app.modules.billing.models import CheckoutSession, CheckoutSessionStatus
from app.modules.billing.providers import PaymentProcessorClient
from app.modules.billing.services import CheckoutService
from app.shared.config.settings_payments import PaymentsSettings


def _client(handler) -> PaymentProcessorClient:
    settings = PaymentsSettings(api_key="rp_test_key")
    return PaymentProcessorClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_create_checkout_persists_pending_session(session_factory, fixed_now):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"session_id": "ps_999"})

    service = CheckoutService(client=_client(handler))
    async with session_factory() as session:
        result = await service.create_checkout(session, 7, email="a@example.com", now=fixed_now)

    assert result.session_token.startswith("session_")
    assert len(result.session_token) == len("session_") + 64
    assert result.checkout_url == "https://checkout.redotpay.com/pay/ps_999"
    assert result.expires_at == fixed_now + timedelta(minutes=30)
    assert (result.amount_cents, result.currency) == (700, "DZD")

    assert captured["url"] == "https://api.redotpay.com/v1/checkout/sessions"
    assert captured["auth"] == "Bearer rp_test_key"
    body = captured["body"]
    assert body["amount"] == 700
    assert body["customer_email"] == "a@example.com"
    assert body["metadata"]["user_id"] == 7
    assert body["success_url"].endswith(f"?session={result.session_token}")

    async with session_factory() as session:
        row = (await session.execute(select(CheckoutSession))).scalar_one()
    assert row.status == CheckoutSessionStatus.PENDING.value
    assert row.processor_session_id == "ps_999"
    assert row.session_token == result.session_token


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, text="<html>"),
    ],
)
async def test_processor_errors_raise_provider_error(session_factory, response):
    service = CheckoutService(client=_client(lambda request: response))

    async with session_factory() as session:
        with pytest.raises(PaymentProviderError):
            await service.create_checkout(session, 7)
        await session.rollback()

    async with session_factory() as session:
        assert (await session.execute(select(CheckoutSession))).first() is None


@pytest.mark.asyncio
async def test_processor_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentProviderError, match="unreachable"):
        await _client(handler).create_checkout_session(
            amount_cents=700,
            currency="DZD",
            customer_email=None,
            description="x",
            metadata={},
            success_url="https://s",
            cancel_url="https://c",
        )
