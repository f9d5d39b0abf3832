# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/services/code_status.py

Estado de presentación de un código para listados.

Autor: EcoPro
Fecha: 2026-10-10
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from app.shared.config.settings_codes import get_codes_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow

from ..enums import CodeDisplayStatus, CodeRequestStatus
from ..models import CodeRequest


def display_status(
    code_request: CodeRequest,
    now: Optional[datetime] = None,
    expiring_soon_minutes: Optional[int] = None,
) -> CodeDisplayStatus:
    """
    issued con menos de 15 min restantes -> expiring_soon;
    issued ya vencido (sweeper pendiente) -> expired.
    """
    if code_request.status != CodeRequestStatus.ISSUED.value:
        return CodeDisplayStatus(code_request.status)

    if code_request.expiry_date is None:
        return CodeDisplayStatus.ISSUED

    now = ensure_utc(now) if now else utcnow()
    threshold = timedelta(
        minutes=expiring_soon_minutes
        if expiring_soon_minutes is not None
        else get_codes_settings().expiring_soon_minutes
    )
    remaining = ensure_utc(code_request.expiry_date) - now
    if remaining.total_seconds() <= 0:
        return CodeDisplayStatus.EXPIRED
    if remaining < threshold:
        return CodeDisplayStatus.EXPIRING_SOON
    return CodeDisplayStatus.ISSUED


__all__ = ["display_status"]
