# -*- coding: utf-8 -*-
"""
Tests para IssuanceService.

Cubre:
- request_code: crea pending + mensaje CODE_REQUEST; idempotente
- request_code sobre chat ajeno/inexistente -> ChatNotFound
- issue_code: pending -> issued, TTL 1h, mensaje CODE_RESPONSE en el chat
- issue_code sobre solicitudes finalizadas -> AlreadyFinalized (409)
- issue_code por otro vendedor -> CodeRequestNotFound
- Estadísticas del vendedor y estado de presentación
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from app.modules.chat import ChatMessageSink, MessageType, SenderType
from app.modules.subscription_codes.enums import CodeDisplayStatus, CodeRequestStatus
from app.modules.subscription_codes.errors import (
    AlreadyFinalized,
    ChatNotFound,
    CodeRequestNotFound,
    CodeWrongState,
)
from app.modules.subscription_codes.models import CodeRequest
from app.modules.subscription_codes.services import IssuanceService, display_status
from app.modules.subscription_codes.services.issuance_service import build_code_message, format_ttl
from app.modules.subscription_codes.utils import CODE_PATTERN


@pytest.mark.parametrize(
    "minutes, expected",
    [(60, "1 hour"), (120, "2 hours"), (30, "30 minutes"), (1, "1 minute")],
)
def test_format_ttl(minutes, expected):
    assert format_ttl(minutes) == expected


def test_build_code_message():
    message = build_code_message("ABCD-EFGH-JKLM-NPQR", 60, "cash")
    assert message == (
        "Your subscription code is: ABCD-EFGH-JKLM-NPQR\n\n"
        "Code expires in: 1 hour\n\n"
        "Payment method: cash"
    )


# ==================== REQUEST ====================

@pytest.mark.asyncio
async def test_request_code_creates_pending_and_posts_message(session_factory, chat_factory, fixed_now):
    chat_id = await chat_factory(client_id=101, seller_id=201)
    service = IssuanceService()

    async with session_factory() as session:
        code_request, created = await service.request_code(
            session, chat_id, 101, message="I paid in cash", now=fixed_now
        )

    assert created is True
    assert code_request.status == CodeRequestStatus.PENDING.value
    assert code_request.seller_id == 201
    assert code_request.generated_code is None

    async with session_factory() as session:
        messages = await ChatMessageSink().list_messages(session, chat_id)
    assert len(messages) == 1
    assert messages[0].message_type == MessageType.CODE_REQUEST.value
    assert messages[0].sender_type == SenderType.CLIENT.value
    assert messages[0].message_metadata == {"code_request_id": code_request.id}


@pytest.mark.asyncio
async def test_request_code_is_idempotent_while_pending(session_factory, chat_factory, fixed_now):
    chat_id = await chat_factory()
    service = IssuanceService()

    async with session_factory() as session:
        first, _ = await service.request_code(session, chat_id, 101, now=fixed_now)
    async with session_factory() as session:
        second, created = await service.request_code(session, chat_id, 101, now=fixed_now)

    assert created is False
    assert second.id == first.id


@pytest.mark.asyncio
async def test_request_code_rejects_foreign_chat(session_factory, chat_factory):
    chat_id = await chat_factory(client_id=101)
    service = IssuanceService()

    async with session_factory() as session:
        with pytest.raises(ChatNotFound):
            await service.request_code(session, chat_id, 999)
        with pytest.raises(ChatNotFound):
            await service.request_code(session, chat_id + 1000, 101)


# ==================== ISSUE ====================

@pytest.mark.asyncio
async def test_issue_code_transitions_and_notifies(session_factory, code_factory, fixed_now):
    pending = await code_factory(status=CodeRequestStatus.PENDING)
    service = IssuanceService(code_ttl_minutes=60)

    async with session_factory() as session:
        result = await service.issue_code(
            session, pending.id, 201, "cash", notes="paid at store", now=fixed_now
        )

    assert CODE_PATTERN.match(result.code)
    assert result.expires_at == fixed_now + timedelta(hours=1)

    async with session_factory() as session:
        row = (await session.execute(select(CodeRequest))).scalar_one()
        assert row.status == CodeRequestStatus.ISSUED.value
        assert row.generated_code == result.code
        assert row.expiry_date == fixed_now + timedelta(hours=1)
        assert row.issued_at == fixed_now
        assert row.payment_method == "cash"
        assert row.seller_notes == "paid at store"

        messages = await ChatMessageSink().list_messages(session, pending.chat_id)
    assert len(messages) == 1
    message = messages[0]
    assert message.message_type == MessageType.CODE_RESPONSE.value
    assert message.sender_id == 201
    assert message.message_content == build_code_message(result.code, 60, "cash")
    assert message.message_metadata["code"] == result.code
    assert message.message_metadata["code_request_id"] == pending.id


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [CodeRequestStatus.USED, CodeRequestStatus.EXPIRED])
async def test_issue_code_on_finalized_request(session_factory, code_factory, status):
    finalized = await code_factory(status=status)

    async with session_factory() as session:
        with pytest.raises(AlreadyFinalized) as exc_info:
            await IssuanceService().issue_code(session, finalized.id, 201, "cash")

    assert exc_info.value.http_status == 409


@pytest.mark.asyncio
async def test_issue_code_on_issued_request_conflicts(session_factory, code_factory):
    issued = await code_factory(status=CodeRequestStatus.ISSUED)

    async with session_factory() as session:
        with pytest.raises(CodeWrongState) as exc_info:
            await IssuanceService().issue_code(session, issued.id, 201, "cash")

    assert exc_info.value.http_status == 409


@pytest.mark.asyncio
async def test_issue_code_by_other_seller(session_factory, code_factory):
    pending = await code_factory(status=CodeRequestStatus.PENDING, seller_id=201)

    async with session_factory() as session:
        with pytest.raises(CodeRequestNotFound):
            await IssuanceService().issue_code(session, pending.id, 202, "cash")
        with pytest.raises(CodeRequestNotFound):
            await IssuanceService().issue_code(session, pending.id + 1000, 201, "cash")


# ==================== LISTADOS Y ESTADÍSTICAS ====================

@pytest.mark.asyncio
async def test_seller_stats(session_factory, code_factory):
    await code_factory(status=CodeRequestStatus.PENDING)
    await code_factory("AAAA-AAAA-AAAA-AAA1", status=CodeRequestStatus.ISSUED)
    await code_factory("AAAA-AAAA-AAAA-AAA2", status=CodeRequestStatus.USED)
    await code_factory("AAAA-AAAA-AAAA-AAA3", status=CodeRequestStatus.USED)
    await code_factory("AAAA-AAAA-AAAA-AAA4", status=CodeRequestStatus.EXPIRED)
    await code_factory("AAAA-AAAA-AAAA-AAA5", status=CodeRequestStatus.USED, seller_id=999)

    async with session_factory() as session:
        stats = await IssuanceService().seller_code_stats(session, 201)

    assert (stats.pending, stats.issued, stats.used, stats.expired) == (1, 1, 2, 1)
    assert stats.total == 5
    assert stats.redemption_rate == pytest.approx(2 / 3, abs=1e-4)


@pytest.mark.asyncio
async def test_listings_are_scoped(session_factory, code_factory):
    await code_factory("AAAA-AAAA-AAAA-AAA1", client_id=101, seller_id=201)
    await code_factory("AAAA-AAAA-AAAA-AAA2", client_id=102, seller_id=201)

    service = IssuanceService()
    async with session_factory() as session:
        client_codes = await service.list_codes_for_client(session, 101)
        seller_codes = await service.list_codes_for_seller(session, 201)

    assert [c.client_id for c in client_codes] == [101]
    assert len(seller_codes) == 2


def test_display_status(fixed_now):
    row = CodeRequest(status=CodeRequestStatus.ISSUED.value, expiry_date=fixed_now + timedelta(minutes=30))
    assert display_status(row, now=fixed_now, expiring_soon_minutes=15) == CodeDisplayStatus.ISSUED

    row.expiry_date = fixed_now + timedelta(minutes=10)
    assert display_status(row, now=fixed_now, expiring_soon_minutes=15) == CodeDisplayStatus.EXPIRING_SOON

    row.expiry_date = fixed_now - timedelta(seconds=1)
    assert display_status(row, now=fixed_now, expiring_soon_minutes=15) == CodeDisplayStatus.EXPIRED

    row.status = CodeRequestStatus.USED.value
    assert display_status(row, now=fixed_now) == CodeDisplayStatus.USED
