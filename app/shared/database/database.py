from __future__ import annotations
# -*- coding: utf-8 -*-
"""
app/shared/database/database.py

SQLAlchemy async: asyncpg en producción, aiosqlite en desarrollo/tests.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Dependencia FastAPI: get_async_session
- context manager para jobs: get_async_session_context()
- check_database_health()

Notas:
- Timeouts a nivel de conexión para asyncpg (timeout, command_timeout).
- En Postgres se aplica SET SESSION statement_timeout al abrir cada sesión.
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.config import get_settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)


def _build_connect_args(database_url: str) -> dict:
    """connect_args específicos del driver."""
    settings = get_settings()
    if not database_url.startswith("postgresql+asyncpg"):
        return {}

    connect_args: dict = {
        "statement_cache_size": 0,
        "server_settings": {"search_path": "public"},
        "timeout": settings.db_connect_timeout_s,
        "command_timeout": settings.db_command_timeout_s,
    }
    if settings.db_tls:
        ctx = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)
        ctx.check_hostname = True
        ctx.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ctx
    return connect_args


def build_engine(database_url: str | None = None) -> AsyncEngine:
    """Crea el engine async a partir de settings (o de una URL explícita)."""
    settings = get_settings()
    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        # SQLite: una conexión por sesión, sin pool compartido entre tareas
        return create_async_engine(url, poolclass=NullPool, echo=settings.db_echo_sql)

    return create_async_engine(
        url,
        pool_pre_ping=True,
        echo=settings.db_echo_sql,
        connect_args=_build_connect_args(url),
    )


engine = build_engine()

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Hook de configuración por sesión
async def _configure_session(session: AsyncSession) -> None:
    """
    SET SESSION statement_timeout para limitar consultas largas (solo Postgres).
    """
    bind = session.get_bind()
    if bind.dialect.name != "postgresql":
        return
    timeout_ms = int(get_settings().db_session_statement_timeout_ms)
    await session.execute(text(f"SET SESSION statement_timeout = {timeout_ms}"))


# ── Dependencias FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        await _configure_session(session)
        try:
            yield session
        except SQLAlchemyError:
            # rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager para jobs y scripts
@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        await _configure_session(session)
        try:
            yield session
        finally:
            # commit/rollback es responsabilidad de quien usa el scope
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("Database health check failed: %s", e)
        return False


__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "get_async_session_context",
    "check_database_health",
]
# Fin del archivo app/shared/database/database.py
