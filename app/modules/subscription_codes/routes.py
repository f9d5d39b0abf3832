# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/routes.py

Endpoints del ciclo de vida de códigos de suscripción.

- POST /codes/validate   verificación sin efectos (sin auth)
- POST /codes/redeem     canje por el cliente
- POST /codes/request    el cliente pide un código en un chat
- POST /codes/issue      el vendedor emite el código
- GET  /codes/my-codes   listado del cliente o vendedor
- GET  /codes/stats      estadísticas del vendedor
- POST /codes/cleanup    tick del sweeper (token de servicio interno)

Autor: EcoPro
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth import Principal, UserRole, get_current_principal, require_client, require_seller
from app.shared.database.database import SessionLocal, get_async_session
from app.shared.http_utils.request_meta import get_request_meta
from app.shared.internal_auth import InternalServiceAuth
from app.shared.scheduler import get_scheduler
from app.shared.security.rate_limit_dep import rate_limit_response
from app.shared.utils.json_response import error_response

from .errors import MalformedCode, RateLimited, SubscriptionCodeError
from .jobs import CodeExpirySweeper
from .models import CodeRequest
from .schemas import (
    CleanupResponse,
    CodeInput,
    CodeRequestCreate,
    CodeRequestCreatedResponse,
    CodeRequestOut,
    IssueCodeRequest,
    IssueCodeResponse,
    MyCodesResponse,
    RedeemCodeResponse,
    SellerStatsResponse,
    SubscriptionSummary,
    ValidateCodeResponse,
)
from .services import IssuanceService, RedemptionService, display_status
from .services.issuance_service import format_ttl

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/codes", tags=["subscription-codes"])


# ===== DEPENDENCIAS =====

def get_redemption_service() -> RedemptionService:
    return RedemptionService()


def get_issuance_service() -> IssuanceService:
    return IssuanceService()


def get_expiry_sweeper(request: Request) -> CodeExpirySweeper:
    """Sweeper creado en el lifespan; fallback para apps sin lifespan."""
    sweeper: Optional[CodeExpirySweeper] = getattr(request.app.state, "code_expiry_sweeper", None)
    if sweeper is None:
        sweeper = CodeExpirySweeper(SessionLocal, get_scheduler())
    return sweeper


# ===== HELPERS =====

def _domain_error(exc: SubscriptionCodeError, **fields) -> JSONResponse:
    if isinstance(exc, RateLimited):
        return rate_limit_response(
            exc.reset_in,
            exc.message,
            extra={"error": exc.message, "resetIn": exc.reset_in, **fields},
        )
    return error_response(exc.http_status, exc.message, errorCode=exc.error_code, **fields)


def _code_request_out(code_request: CodeRequest) -> CodeRequestOut:
    out = CodeRequestOut.model_validate(code_request)
    return out.model_copy(update={"status": display_status(code_request).value})


# ===== ENDPOINTS =====

@router.post("/validate", response_model=ValidateCodeResponse, response_model_exclude_none=True)
async def validate_code(
    body: CodeInput,
    session: AsyncSession = Depends(get_async_session),
    service: RedemptionService = Depends(get_redemption_service),
):
    result = await service.validate(session, body.code)
    if result.valid:
        return ValidateCodeResponse(valid=True)
    if isinstance(result.error, MalformedCode):
        return error_response(status.HTTP_400_BAD_REQUEST, result.error.message, valid=False)
    return ValidateCodeResponse(valid=False, error=result.error.message)


@router.post("/redeem", response_model=RedeemCodeResponse)
async def redeem_code(
    body: CodeInput,
    request: Request,
    principal: Principal = Depends(require_client),
    session: AsyncSession = Depends(get_async_session),
    service: RedemptionService = Depends(get_redemption_service),
):
    meta = get_request_meta(request)
    try:
        result = await service.redeem(
            session,
            body.code,
            principal.user_id,
            ip_address=meta["ip_address"],
            user_agent=meta["user_agent"],
        )
    except SubscriptionCodeError as exc:
        return _domain_error(exc, success=False, attemptsRemaining=exc.attempts_remaining)

    return RedeemCodeResponse(
        success=True,
        subscription=SubscriptionSummary.model_validate(result.subscription),
        attempts_remaining=result.attempts_remaining,
    )


@router.post(
    "/request",
    response_model=CodeRequestCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_code(
    body: CodeRequestCreate,
    principal: Principal = Depends(require_client),
    session: AsyncSession = Depends(get_async_session),
    service: IssuanceService = Depends(get_issuance_service),
):
    try:
        code_request, _created = await service.request_code(
            session, body.chat_id, principal.user_id, message=body.message
        )
    except SubscriptionCodeError as exc:
        return _domain_error(exc, success=False)

    return CodeRequestCreatedResponse(success=True, code_request=_code_request_out(code_request))


@router.post("/issue", response_model=IssueCodeResponse)
async def issue_code(
    body: IssueCodeRequest,
    principal: Principal = Depends(require_seller),
    session: AsyncSession = Depends(get_async_session),
    service: IssuanceService = Depends(get_issuance_service),
):
    try:
        result = await service.issue_code(
            session,
            body.code_request_id,
            principal.user_id,
            body.payment_method,
            notes=body.notes,
        )
    except SubscriptionCodeError as exc:
        return _domain_error(exc, success=False)

    return IssueCodeResponse(
        success=True,
        code=result.code,
        expires_at=result.expires_at,
        message=f"Code issued. It expires in {format_ttl(service.code_ttl_minutes)}.",
    )


@router.get("/my-codes", response_model=MyCodesResponse)
async def my_codes(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: IssuanceService = Depends(get_issuance_service),
) -> MyCodesResponse:
    if principal.role == UserRole.seller:
        rows = await service.list_codes_for_seller(session, principal.user_id)
    else:
        rows = await service.list_codes_for_client(session, principal.user_id)
    return MyCodesResponse(codes=[_code_request_out(row) for row in rows])


@router.get("/stats", response_model=SellerStatsResponse)
async def seller_stats(
    principal: Principal = Depends(require_seller),
    session: AsyncSession = Depends(get_async_session),
    service: IssuanceService = Depends(get_issuance_service),
) -> SellerStatsResponse:
    stats = await service.seller_code_stats(session, principal.user_id)
    return SellerStatsResponse.model_validate(stats)


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_expired_codes(
    _auth: InternalServiceAuth,
    sweeper: CodeExpirySweeper = Depends(get_expiry_sweeper),
) -> CleanupResponse:
    result = await sweeper.run_once()
    logger.info("Manual code cleanup: %s", result)
    return CleanupResponse.model_validate(result)


__all__ = [
    "router",
    "get_redemption_service",
    "get_issuance_service",
    "get_expiry_sweeper",
]
