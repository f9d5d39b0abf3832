# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/repositories/__init__.py
"""

from .code_request_repository import CodeRequestRepository, ExpiredCode
from .validation_attempt_repository import ValidationAttemptRepository

__all__ = [
    "CodeRequestRepository",
    "ExpiredCode",
    "ValidationAttemptRepository",
]
