# -*- coding: utf-8 -*-
"""
Config global de tests para EcoPro Billing.

- Variables de entorno de test ANTES de importar la app (settings y
  engine global se resuelven al importar app.shared.database).
- Motor ASYNC: sqlite+aiosqlite en archivo temporal por test, con
  BEGIN IMMEDIATE para serializar escritores como lo haría Postgres con
  bloqueos de fila (necesario para los tests de concurrencia).
- App FastAPI con get_async_session y get_expiry_sweeper sobreescritos.
- Cliente httpx con ASGITransport y ciclo de vida vía asgi-lifespan.
"""

import os

# -----------------------------------------------------------------------------
# 0) Variables mínimas de entorno
# -----------------------------------------------------------------------------
WEBHOOK_SECRET = "whsec_test_payment_processor"
INTERNAL_TOKEN = "test-internal-token"

os.environ["PYTHON_ENV"] = "test"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CODES_SWEEP_ENABLED"] = "false"
os.environ["PAYMENTS_WEBHOOK_SECRET"] = WEBHOOK_SECRET
os.environ["APP_SERVICE_TOKEN"] = INTERNAL_TOKEN
os.environ.setdefault("METRICS_ENABLED", "true")

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.database.database import Base

# Registro de modelos en Base.metadata (orden: chats antes que code_requests)
from app.modules.chat.models import Chat, ChatMessage  # noqa: F401
from app.modules.billing.models import CheckoutSession, Payment, Subscription  # noqa: F401
from app.modules.subscription_codes.models import CodeRequest, ValidationAttempt  # noqa: F401

from app.main import create_app
from app.modules.auth.security import create_access_token
from app.modules.subscription_codes.enums import CodeRequestStatus
from app.shared.scheduler import SchedulerService
import app.shared.scheduler.scheduler_service as scheduler_service

FIXED_NOW = datetime(2026, 10, 15, 12, 0, 0, tzinfo=timezone.utc)


# -----------------------------------------------------------------------------
# 1) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def engine(tmp_path):
    """
    Motor SQLite en archivo temporal.

    isolation_level=None desactiva el BEGIN implícito de pysqlite y el
    listener de "begin" emite BEGIN IMMEDIATE: cada transacción toma el
    lock de escritura al empezar y las demás esperan (busy timeout).
    """
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ecopro_test.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 15},
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# -----------------------------------------------------------------------------
# 2) Fábricas de datos
# -----------------------------------------------------------------------------
@pytest.fixture
def chat_factory(session_factory):
    """Crea una conversación cliente/vendedor y devuelve su id."""

    async def _create(client_id: int = 101, seller_id: int = 201) -> int:
        async with session_factory() as session:
            chat = Chat(client_id=client_id, seller_id=seller_id, created_at=FIXED_NOW)
            session.add(chat)
            await session.commit()
            return chat.id

    return _create


@pytest.fixture
def code_factory(session_factory, chat_factory):
    """Inserta un code_request en el estado pedido y devuelve la fila."""

    async def _create(
        code: Optional[str] = "ABCD-EFGH-JKLM-NPQR",
        *,
        client_id: int = 101,
        seller_id: int = 201,
        status: CodeRequestStatus = CodeRequestStatus.ISSUED,
        issued_at: datetime = FIXED_NOW,
        expiry_date: Optional[datetime] = None,
        chat_id: Optional[int] = None,
    ) -> CodeRequest:
        chat_id = chat_id or await chat_factory(client_id=client_id, seller_id=seller_id)
        async with session_factory() as session:
            row = CodeRequest(
                chat_id=chat_id,
                client_id=client_id,
                seller_id=seller_id,
                status=status.value,
                generated_code=None if status == CodeRequestStatus.PENDING else code,
                payment_method=None if status == CodeRequestStatus.PENDING else "cash",
                issued_at=None if status == CodeRequestStatus.PENDING else issued_at,
                expiry_date=(
                    None
                    if status == CodeRequestStatus.PENDING
                    else expiry_date or issued_at + timedelta(hours=1)
                ),
                created_at=issued_at,
                updated_at=issued_at,
            )
            session.add(row)
            await session.commit()
            return row

    return _create


# -----------------------------------------------------------------------------
# 3) Scheduler: instancia nueva por test (el loop de asyncio cambia por test)
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _fresh_scheduler():
    scheduler_service._scheduler_instance = None
    yield
    instance = scheduler_service._scheduler_instance
    if instance is not None and instance.is_running:
        instance.shutdown(wait=False)
    scheduler_service._scheduler_instance = None


@pytest.fixture
def scheduler() -> SchedulerService:
    return SchedulerService()


# -----------------------------------------------------------------------------
# 4) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture
def app(session_factory):
    """App completa con la sesión de BD y el sweeper apuntando al motor de test."""
    from app.modules.subscription_codes.jobs import CodeExpirySweeper
    from app.modules.subscription_codes.routes import get_expiry_sweeper
    from app.shared.database.database import get_async_session

    fastapi_app = create_app()

    async def _session_override() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_async_session] = _session_override
    fastapi_app.dependency_overrides[get_expiry_sweeper] = lambda: CodeExpirySweeper(
        session_factory, SchedulerService()
    )
    return fastapi_app


@pytest.fixture
async def async_client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


# -----------------------------------------------------------------------------
# 5) Auth
# -----------------------------------------------------------------------------
@pytest.fixture
def auth_headers():
    """Headers Authorization con un JWT firmado con el secreto de test."""

    def _headers(user_id: int, role: str = "client", **claims) -> dict[str, str]:
        token = create_access_token(user_id, role=role, **claims)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def internal_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {INTERNAL_TOKEN}"}


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
