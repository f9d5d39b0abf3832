# -*- coding: utf-8 -*-
"""
Tests para ChatMessageSink.
"""

from datetime import timedelta

import pytest

from app.modules.chat import ChatMessageSink, MessageType, SenderType


@pytest.mark.asyncio
async def test_post_and_list_in_order(session_factory, chat_factory, fixed_now):
    chat_id = await chat_factory()
    sink = ChatMessageSink()

    async with session_factory() as session:
        await sink.post(session, chat_id, "second", now=fixed_now + timedelta(seconds=1))
        await sink.post(
            session,
            chat_id,
            "first",
            sender_type=SenderType.CLIENT,
            sender_id=101,
            message_type=MessageType.CODE_REQUEST,
            metadata={"code_request_id": 9},
            now=fixed_now,
        )
        await session.commit()

    async with session_factory() as session:
        messages = await sink.list_messages(session, chat_id)

    assert [m.message_content for m in messages] == ["first", "second"]
    first, second = messages
    assert first.sender_type == "client"
    assert first.message_metadata == {"code_request_id": 9}
    assert second.sender_type == SenderType.SYSTEM.value
    assert second.sender_id is None
    assert second.message_type == MessageType.TEXT.value


@pytest.mark.asyncio
async def test_get_chat(db_session, chat_factory):
    chat_id = await chat_factory(client_id=1, seller_id=2)
    sink = ChatMessageSink()

    chat = await sink.get_chat(db_session, chat_id)
    assert (chat.client_id, chat.seller_id) == (1, 2)
    assert await sink.get_chat(db_session, chat_id + 1) is None
