# -*- coding: utf-8 -*-
"""
app/shared/security/__init__.py

Utilidades de seguridad compartidas.
"""

from .rate_limit_dep import (
    DEFAULT_RATE_LIMIT_MESSAGE,
    RateLimitExceeded,
    rate_limit_exception_handler,
    rate_limit_response,
)

__all__ = [
    "DEFAULT_RATE_LIMIT_MESSAGE",
    "RateLimitExceeded",
    "rate_limit_exception_handler",
    "rate_limit_response",
]
