# -*- coding: utf-8 -*-
"""
app/modules/auth/enums/role_enum.py

Roles presentes en el claim 'role' del JWT.

Autor: EcoPro
Fecha: 2026-10-06
"""
from enum import StrEnum


class UserRole(StrEnum):
    client = "client"
    seller = "seller"
    admin = "admin"


__all__ = ["UserRole"]

# Fin del archivo app/modules/auth/enums/role_enum.py
