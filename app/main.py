# -*- coding: utf-8 -*-
"""
app/main.py

Punto de entrada principal del backend EcoPro Billing.

Ajustes clave:
- Uso de app.core.settings como fachada de configuración.
- Montaje de observabilidad Prometheus (/metrics) vía app.observability.prom
- Scheduler con el sweeper de expiración de códigos (subscription_codes_expiry_sweep)
- Ciclo de vida con detención ordenada del sweeper y del scheduler en shutdown
- Health principal /health delegado al paquete app.routes (health_routes.py)

Autor: EcoPro
Fecha: 2026-10-13
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
_override_env = _PYTHON_ENV not in ("production", "test")
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.logging import setup_logging
from app.core.settings import get_settings

_settings = get_settings()
setup_logging(level=_settings.log_level, fmt=_settings.log_format, service=_settings.app_name)
logger = logging.getLogger(__name__)

logger.info("[dotenv] Loaded %s (override=%s, PYTHON_ENV=%s)", _ENV_PATH, _override_env, _PYTHON_ENV)

from app.core.db import SessionLocal
from app.modules.chat import ChatMessageSink
from app.modules.subscription_codes.jobs import CodeExpirySweeper
from app.observability.prom import setup_observability
from app.shared.config import get_codes_settings
from app.shared.scheduler import get_scheduler
from app.shared.security.rate_limit_dep import RateLimitExceeded, rate_limit_exception_handler
from app.shared.utils.json_response import UTF8JSONResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    scheduler = get_scheduler()
    sweeper = CodeExpirySweeper(SessionLocal, scheduler, ChatMessageSink())
    app.state.code_expiry_sweeper = sweeper

    if get_codes_settings().sweep_enabled:
        sweeper.start()
    else:
        logger.info("Code expiry sweeper disabled (CODES_SWEEP_ENABLED=false)")

    scheduler.start()
    logger.info("⏰ Scheduler iniciado con %d job(s)", len(scheduler.get_jobs()))

    logger.info("🟢 Backend de EcoPro Billing iniciado.")
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        logger.info("🔴 Iniciando shutdown ordenado...")
        with anyio.CancelScope(shield=True):
            sweeper.stop()
            scheduler.shutdown(wait=True)
            logger.info("⏰ Scheduler detenido")
        logger.info("🔴 Backend de EcoPro Billing apagado.")


openapi_tags = [
    {"name": "subscription-codes", "description": "Emisión, validación y canje de códigos"},
    {"name": "billing", "description": "Suscripción, acceso, historial de pagos y checkout"},
    {"name": "billing:webhooks", "description": "Webhooks del procesador de pagos"},
]


def create_app() -> FastAPI:
    """Construye la aplicación FastAPI con middlewares, handlers y routers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="API de suscripciones por código y conciliación de pagos",
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        default_response_class=UTF8JSONResponse,
    )

    # El orden real de ejecución de middlewares en Starlette es inverso al registro:
    # CORS se registra al final para ejecutarse primero.
    if settings.metrics_enabled:
        setup_observability(app)

    origins = settings.get_cors_origins()
    wildcard = origins == ["*"]
    if wildcard and settings.is_prod:
        logger.error("❌ Refusing wildcard CORS in production; set CORS_ORIGINS explicitly")
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            # "*" con credenciales es inválido en navegadores
            allow_credentials=not wildcard,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Retry-After"],
            max_age=600,
        )
        logger.info("🌐 CORS enabled for %s", origins)

    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)

    from app.routes import router as main_router

    app.include_router(main_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"service": settings.app_name, "status": "active"}

    return app


app = create_app()


if __name__ == "__main__":
    is_production = _settings.is_prod
    logger.info("🔧 Starting server with reload=%s (production=%s)", not is_production, is_production)

    uvicorn.run(
        "app.main:app",
        host=_settings.app_host,
        port=int(_settings.app_port),
        reload=not is_production,
    )

# Fin del archivo app/main.py
