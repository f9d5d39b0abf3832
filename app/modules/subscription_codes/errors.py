# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/errors.py

Errores de dominio del ciclo de vida de códigos.

Cada clase declara su código HTTP, un mensaje público corto y el
resultado que se registra como intento de validación (None = no se
registra). Las rutas traducen estos errores a cuerpos JSON.

Autor: EcoPro
Fecha: 2026-10-08
"""

from __future__ import annotations

from typing import Optional

from .enums import AttemptOutcome


class SubscriptionCodeError(Exception):
    error_code: str = "subscription_code_error"
    http_status: int = 400
    message: str = "Subscription code error"
    attempt_outcome: Optional[AttemptOutcome] = None

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        attempts_remaining: Optional[int] = None,
        http_status: Optional[int] = None,
    ):
        if message is not None:
            self.message = message
        if http_status is not None:
            self.http_status = http_status
        self.attempts_remaining = attempts_remaining
        super().__init__(self.message)


class MalformedCode(SubscriptionCodeError):
    error_code = "malformed_code"
    message = "Invalid code format"


class CodeNotFound(SubscriptionCodeError):
    error_code = "invalid_code"
    message = "Invalid code"
    attempt_outcome = AttemptOutcome.INVALID


class CodeNotYours(CodeNotFound):
    """Mismo mensaje público que CodeNotFound para no revelar existencia."""


class CodeWrongState(SubscriptionCodeError):
    error_code = "code_wrong_state"
    message = "Code is no longer valid"
    attempt_outcome = AttemptOutcome.INVALID


class CodeExpired(SubscriptionCodeError):
    error_code = "code_expired"
    message = "Code has expired"
    attempt_outcome = AttemptOutcome.EXPIRED


class CodeAlreadyRedeemed(SubscriptionCodeError):
    error_code = "code_already_used"
    message = "Code has already been used"
    attempt_outcome = AttemptOutcome.ALREADY_USED


class AlreadyFinalized(SubscriptionCodeError):
    error_code = "already_finalized"
    http_status = 409
    message = "Code request is already finalized"


class RateLimited(SubscriptionCodeError):
    error_code = "rate_limited"
    http_status = 429
    message = "Too many attempts. Please try again later."

    def __init__(self, reset_in: int, message: Optional[str] = None):
        super().__init__(message, attempts_remaining=0)
        self.reset_in = reset_in


class GenerationExhausted(SubscriptionCodeError):
    error_code = "generation_exhausted"
    http_status = 500
    message = "Could not generate a code"


class RedemptionFailed(SubscriptionCodeError):
    error_code = "redemption_failed"
    http_status = 503
    message = "Code redemption is temporarily unavailable. Please retry."


class IssuanceFailed(SubscriptionCodeError):
    error_code = "issuance_failed"
    http_status = 503
    message = "Code issuance is temporarily unavailable. Please retry."


class CodeRequestNotFound(SubscriptionCodeError):
    error_code = "code_request_not_found"
    http_status = 404
    message = "Code request not found"


class ChatNotFound(SubscriptionCodeError):
    error_code = "chat_not_found"
    http_status = 404
    message = "Chat not found"


__all__ = [
    "SubscriptionCodeError",
    "MalformedCode",
    "CodeNotFound",
    "CodeNotYours",
    "CodeWrongState",
    "CodeExpired",
    "CodeAlreadyRedeemed",
    "AlreadyFinalized",
    "RateLimited",
    "GenerationExhausted",
    "RedemptionFailed",
    "IssuanceFailed",
    "CodeRequestNotFound",
    "ChatNotFound",
]
