# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/enums.py

Enums del ciclo de vida de códigos de suscripción.

Se guardan como strings cortos en las columnas de estado; los valores
de estos enums son el dominio válido.

Autor: EcoPro
Fecha: 2026-10-08
"""
from enum import Enum


class CodeRequestStatus(str, Enum):
    """
    pending -> issued -> {used | expired}

    used y expired son terminales.
    """
    PENDING = "pending"
    ISSUED = "issued"
    USED = "used"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in (CodeRequestStatus.USED, CodeRequestStatus.EXPIRED)


class CodeDisplayStatus(str, Enum):
    """Estado mostrado al usuario en listados."""
    PENDING = "pending"
    ISSUED = "issued"
    EXPIRING_SOON = "expiring_soon"
    USED = "used"
    EXPIRED = "expired"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    EXPIRED = "expired"
    ALREADY_USED = "already_used"


class ActorType(str, Enum):
    CLIENT = "client"
    SELLER = "seller"


__all__ = [
    "CodeRequestStatus",
    "CodeDisplayStatus",
    "AttemptOutcome",
    "ActorType",
]
