# -*- coding: utf-8 -*-
"""
app/modules/chat/enums.py

Enums de mensajes de chat que escribe el backend de suscripciones.

Autor: EcoPro
Fecha: 2026-10-07
"""
from enum import Enum


class SenderType(str, Enum):
    CLIENT = "client"
    SELLER = "seller"
    SYSTEM = "system"


class MessageType(str, Enum):
    TEXT = "text"
    CODE_REQUEST = "code_request"
    CODE_RESPONSE = "code_response"
    SYSTEM = "system"


__all__ = ["SenderType", "MessageType"]
