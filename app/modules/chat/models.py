# -*- coding: utf-8 -*-
"""
app/modules/chat/models.py

Modelos ORM de chats y chat_messages.

La tabla chats pertenece al sistema de mensajería; aquí solo se lee para
resolver cliente y vendedor de una conversación. chat_messages es
append-only desde este backend.

Autor: EcoPro
Fecha: 2026-10-07
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime

from .enums import MessageType


class Chat(Base):
    __tablename__ = "chats"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Chat id={self.id} client={self.client_id} seller={self.seller_id}>"


class ChatMessage(Base):
    """Mensaje de una conversación (texto, solicitud/entrega de código, sistema)."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    chat_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
        doc="NULL para mensajes de sistema.",
    )
    sender_type: Mapped[str] = mapped_column(String(16), nullable=False)
    message_content: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=MessageType.TEXT.value,
    )
    # "metadata" está reservado en los modelos declarativos
    message_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_chat_messages_chat_created", "chat_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ChatMessage id={self.id} chat={self.chat_id} type={self.message_type}>"


__all__ = ["Chat", "ChatMessage"]
