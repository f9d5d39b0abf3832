# -*- coding: utf-8 -*-
"""
app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- BigIntPK: BIGINT en Postgres, INTEGER en SQLite (autoincrement vía rowid)
- UTCDateTime: timestamp que siempre se lee como datetime UTC aware

Autor: EcoPro
Fecha: 2026-10-02
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from app.shared.utils.datetime_helpers import ensure_utc

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== TIPOS PORTABLES =====
# SQLite solo autoincrementa columnas "INTEGER PRIMARY KEY"
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


class UTCDateTime(TypeDecorator):
    """
    DateTime(timezone=True) que normaliza a UTC al escribir y al leer.

    SQLite no guarda zona horaria y devuelve datetimes naive; aquí se
    reinterpretan como UTC para que las comparaciones con utcnow() sean válidas.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM de EcoPro.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


__all__ = ["Base", "NAMING_CONVENTION", "BigIntPK", "UTCDateTime"]

# Fin del archivo app/shared/database/base.py
