# -*- coding: utf-8 -*-
"""
Tests HTTP de billing.

Cubre:
- POST /webhook/payment-processor: 401 / 400 / 200 / 500
- GET /api/billing/subscription, /check-access, /payments
- POST /api/billing/checkout con procesador simulado (201 / 502)
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from app.modules.billing.providers import PaymentProcessorClient
from app.modules.billing.routes.subscription_routes import get_checkout_service
from app.modules.billing.services import CheckoutService
from app.modules.billing.webhook_routes import get_webhook_reconciler
from app.modules.billing.webhooks import PaymentWebhookReconciler, compute_signature
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

WEBHOOK_URL = "/webhook/payment-processor"
WEBHOOK_SECRET = get_payments_settings().webhook_secret.get_secret_value()


def _signed(payload: dict) -> tuple[bytes, dict[str, str]]:
    body = json.dumps(payload).encode()
    return body, {
        "Content-Type": "application/json",
        "X-Payment-Signature": compute_signature(body, WEBHOOK_SECRET),
    }


def _completed(transaction_id: str = "txn_http", user_id: int = 101) -> dict:
    return {
        "event": "payment.completed",
        "data": {
            "transaction_id": transaction_id,
            "amount": 700,
            "currency": "DZD",
            "metadata": {"user_id": user_id},
        },
    }


# ==================== WEBHOOK ====================

@pytest.mark.asyncio
async def test_webhook_rejects_bad_signature(async_client):
    body = json.dumps(_completed()).encode()

    missing = await async_client.post(WEBHOOK_URL, content=body)
    assert missing.status_code == 401

    wrong = await async_client.post(
        WEBHOOK_URL, content=body, headers={"X-Payment-Signature": "0" * 64}
    )
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_webhook_rejects_non_ascii_signature(async_client):
    body = json.dumps(_completed()).encode()

    resp = await async_client.post(
        WEBHOOK_URL,
        content=body,
        headers={"X-Payment-Signature": "caf\u00e9".encode("utf-8")},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_webhook_rejects_malformed_payload(async_client):
    body = b"{not json"
    resp = await async_client.post(
        WEBHOOK_URL,
        content=body,
        headers={"X-Payment-Signature": compute_signature(body, WEBHOOK_SECRET)},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_webhook_completed_then_replay(async_client, auth_headers):
    body, headers = _signed(_completed())

    first = await async_client.post(WEBHOOK_URL, content=body, headers=headers)
    assert first.status_code == 200
    assert first.json() == {"message": "Webhook processed"}

    replay = await async_client.post(WEBHOOK_URL, content=body, headers=headers)
    assert replay.status_code == 200
    assert replay.json() == {"message": "Webhook acknowledged"}

    payments = await async_client.get("/api/billing/payments", headers=auth_headers(101))
    assert [p["transaction_id"] for p in payments.json()["payments"]] == ["txn_http"]

    access = await async_client.get("/api/billing/check-access", headers=auth_headers(101))
    assert access.json()["has_access"] is True
    assert access.json()["status"] == "active"


@pytest.mark.asyncio
async def test_webhook_alias_header_and_unknown_event(async_client):
    body = json.dumps({"event": "refund.created", "data": {}}).encode()
    resp = await async_client.post(
        WEBHOOK_URL,
        content=body,
        headers={"X-RedotPay-Signature": compute_signature(body, WEBHOOK_SECRET)},
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Webhook acknowledged"}


@pytest.mark.asyncio
async def test_webhook_store_failure_returns_500(app, async_client):
    reconciler = PaymentWebhookReconciler()
    reconciler.reconcile = AsyncMock(side_effect=TimeoutError())
    app.dependency_overrides[get_webhook_reconciler] = lambda: reconciler

    body, headers = _signed(_completed())
    resp = await async_client.post(WEBHOOK_URL, content=body, headers=headers)

    assert resp.status_code == 500


# ==================== SUSCRIPCIÓN ====================

@pytest.mark.asyncio
async def test_subscription_is_created_lazily(async_client, auth_headers):
    resp = await async_client.get("/api/billing/subscription", headers=auth_headers(55))

    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == 55
    assert body["status"] == "trial"

    access = await async_client.get("/api/billing/check-access", headers=auth_headers(55))
    assert access.json()["has_access"] is True
    assert access.json()["days_left"] == 30


@pytest.mark.asyncio
async def test_billing_requires_auth(async_client):
    resp = await async_client.get("/api/billing/subscription")
    assert resp.status_code == 401


# ==================== CHECKOUT ====================

def _checkout_service(handler) -> CheckoutService:
    settings = PaymentsSettings()
    return CheckoutService(
        client=PaymentProcessorClient(settings, transport=httpx.MockTransport(handler))
    )


@pytest.mark.asyncio
async def test_checkout_created(app, async_client, auth_headers):
    service = _checkout_service(lambda request: httpx.Response(200, json={"session_id": "ps_http"}))
    app.dependency_overrides[get_checkout_service] = lambda: service

    resp = await async_client.post(
        "/api/billing/checkout", headers=auth_headers(101, email="client@example.com")
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["checkout_url"].endswith("/ps_http")
    assert body["session_token"].startswith("session_")
    assert body["amount_cents"] == 700


@pytest.mark.asyncio
async def test_checkout_processor_failure_is_502(app, async_client, auth_headers):
    service = _checkout_service(lambda request: httpx.Response(503, text="down"))
    app.dependency_overrides[get_checkout_service] = lambda: service

    resp = await async_client.post("/api/billing/checkout", headers=auth_headers(101))

    assert resp.status_code == 502
