# -*- coding: utf-8 -*-
"""
app/shared/utils/__init__.py

Utilidades comunes.
"""

from .datetime_helpers import ensure_utc, to_iso8601, utcnow
from .json_response import UTF8JSONResponse, error_response

__all__ = [
    "utcnow",
    "ensure_utc",
    "to_iso8601",
    "UTF8JSONResponse",
    "error_response",
]
