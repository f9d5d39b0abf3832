# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/services/__init__.py

Servicios del ciclo de vida de códigos.
"""

from .code_status import display_status
from .issuance_service import IssuanceService, IssueResult, SellerCodeStats
from .rate_limiter import CodeAttemptRateLimiter, RateLimitResult
from .redemption_service import RedemptionResult, RedemptionService, ValidationResult

__all__ = [
    "CodeAttemptRateLimiter",
    "RateLimitResult",
    "RedemptionService",
    "RedemptionResult",
    "ValidationResult",
    "IssuanceService",
    "IssueResult",
    "SellerCodeStats",
    "display_status",
]
