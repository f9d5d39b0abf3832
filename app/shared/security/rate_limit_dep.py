# -*- coding: utf-8 -*-
"""
app/shared/security/rate_limit_dep.py

Respuestas HTTP estándar para límites de tasa excedidos (429).

Author: EcoPro
Updated: 2026-10-05
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

DEFAULT_RATE_LIMIT_MESSAGE = "Too many attempts. Please try again later."


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, retry_after: int, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail or DEFAULT_RATE_LIMIT_MESSAGE,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


def rate_limit_response(
    retry_after: int,
    message: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    429 estandarizado con header Retry-After y charset UTF-8 explícito.

    `extra` permite a cada módulo añadir campos propios (p.ej. resetIn).
    """
    content: Dict[str, Any] = {
        "detail": message or DEFAULT_RATE_LIMIT_MESSAGE,
        "retry_after": retry_after,
        "error_code": "rate_limit_exceeded",
    }
    if extra:
        content.update(extra)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=content,
        headers={"Retry-After": str(retry_after)},
        media_type="application/json; charset=utf-8",
    )


async def rate_limit_exception_handler(request, exc: RateLimitExceeded) -> JSONResponse:
    """Handler global registrado en main.py para RateLimitExceeded."""
    return rate_limit_response(exc.retry_after, str(exc.detail))


__all__ = [
    "RateLimitExceeded",
    "rate_limit_response",
    "rate_limit_exception_handler",
    "DEFAULT_RATE_LIMIT_MESSAGE",
]
