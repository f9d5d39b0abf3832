# -*- coding: utf-8 -*-
"""
app/modules/chat/message_sink.py

Escritura de mensajes en conversaciones.

El sink no hace commit: el mensaje viaja en la transacción del llamador
(emisión de código) o en una propia (notificaciones del sweeper).

Autor: EcoPro
Fecha: 2026-10-07
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .enums import MessageType, SenderType
from .models import Chat, ChatMessage

logger = logging.getLogger(__name__)


class ChatMessageSink:
    """Agrega mensajes a chat_messages y resuelve conversaciones."""

    async def get_chat(self, session: AsyncSession, chat_id: int) -> Optional[Chat]:
        result = await session.execute(select(Chat).where(Chat.id == chat_id))
        return result.scalar_one_or_none()

    async def post(
        self,
        session: AsyncSession,
        chat_id: int,
        content: str,
        *,
        sender_type: SenderType = SenderType.SYSTEM,
        sender_id: Optional[int] = None,
        message_type: MessageType = MessageType.TEXT,
        metadata: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            chat_id=chat_id,
            sender_id=sender_id,
            sender_type=sender_type.value,
            message_content=content,
            message_type=message_type.value,
            message_metadata=metadata,
        )
        if now is not None:
            message.created_at = now
        session.add(message)
        await session.flush()
        logger.debug("Chat message %s appended to chat %s (%s)", message.id, chat_id, message_type.value)
        return message

    async def list_messages(self, session: AsyncSession, chat_id: int) -> list[ChatMessage]:
        result = await session.execute(
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id)
            .order_by(ChatMessage.created_at, ChatMessage.id)
        )
        return list(result.scalars().all())


__all__ = ["ChatMessageSink"]
