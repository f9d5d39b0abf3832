# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/schemas.py

Esquemas Pydantic de los endpoints /codes.

Los nombres JSON son camelCase (attemptsRemaining, codeRequestId, ...)
vía alias_generator; en Python se usan snake_case.

Autor: EcoPro
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class CodeInput(CamelModel):
    code: str = Field(min_length=1, max_length=256, description="Código XXXX-XXXX-XXXX-XXXX (case-insensitive).")


class CodeRequestCreate(CamelModel):
    chat_id: int = Field(gt=0)
    message: Optional[str] = Field(default=None, max_length=1000)


class IssueCodeRequest(CamelModel):
    code_request_id: int = Field(gt=0)
    payment_method: str = Field(min_length=1, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ValidateCodeResponse(CamelModel):
    valid: bool
    error: Optional[str] = None


class SubscriptionSummary(CamelModel):
    id: int
    status: str
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    auto_renew: bool = False


class RedeemCodeResponse(CamelModel):
    success: bool
    subscription: SubscriptionSummary
    attempts_remaining: int


class CodeRequestOut(CamelModel):
    id: int
    chat_id: int
    client_id: int
    seller_id: int
    status: str
    generated_code: Optional[str] = None
    payment_method: Optional[str] = None
    client_message: Optional[str] = None
    issued_at: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    redeemed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class CodeRequestCreatedResponse(CamelModel):
    success: bool
    code_request: CodeRequestOut


class IssueCodeResponse(CamelModel):
    success: bool
    code: str
    expires_at: datetime
    message: str


class MyCodesResponse(CamelModel):
    codes: list[CodeRequestOut] = Field(default_factory=list)


class SellerStatsResponse(CamelModel):
    pending: int
    issued: int
    used: int
    expired: int
    total: int
    redemption_rate: float


class CleanupResponse(CamelModel):
    expired: int
    notified: int
    pruned_attempts: int
    expired_checkouts: int


__all__ = [
    "CodeInput",
    "CodeRequestCreate",
    "IssueCodeRequest",
    "ValidateCodeResponse",
    "SubscriptionSummary",
    "RedeemCodeResponse",
    "CodeRequestOut",
    "CodeRequestCreatedResponse",
    "IssueCodeResponse",
    "MyCodesResponse",
    "SellerStatsResponse",
    "CleanupResponse",
]
