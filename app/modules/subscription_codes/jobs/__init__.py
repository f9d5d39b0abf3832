# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/jobs/__init__.py
"""

from .expiry_sweeper import (
    EXPIRED_CODE_MESSAGE,
    EXPIRY_SWEEP_JOB_ID,
    CodeExpirySweeper,
    SweepResult,
)

__all__ = [
    "CodeExpirySweeper",
    "SweepResult",
    "EXPIRY_SWEEP_JOB_ID",
    "EXPIRED_CODE_MESSAGE",
]
