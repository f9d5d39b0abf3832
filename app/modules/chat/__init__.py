# -*- coding: utf-8 -*-
"""
app/modules/chat/__init__.py

Modelo mínimo de conversaciones y sink de mensajes.
"""

from .enums import MessageType, SenderType
from .message_sink import ChatMessageSink
from .models import Chat, ChatMessage

__all__ = [
    "Chat",
    "ChatMessage",
    "ChatMessageSink",
    "MessageType",
    "SenderType",
]
