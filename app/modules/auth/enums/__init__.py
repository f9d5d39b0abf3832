# -*- coding: utf-8 -*-
"""
app/modules/auth/enums/__init__.py

Export central de enums de autenticación.
"""

from .role_enum import UserRole

__all__ = ["UserRole"]

# Fin del archivo app/modules/auth/enums/__init__.py
