# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/utils/__init__.py
"""

from .code_generator import (
    CODE_ALPHABET,
    CODE_PATTERN,
    canonicalize_code,
    generate_code,
    generate_unique_code,
    is_valid_code_format,
    normalize_code,
)

__all__ = [
    "CODE_ALPHABET",
    "CODE_PATTERN",
    "canonicalize_code",
    "generate_code",
    "generate_unique_code",
    "is_valid_code_format",
    "normalize_code",
]
