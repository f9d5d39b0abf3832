# -*- coding: utf-8 -*-
"""
app/routes/health_routes.py

Endpoint básico de health check de EcoPro Billing.

Autor: EcoPro
Fecha: 2026-10-13
"""

from fastapi import APIRouter, Request

from app.core.db import check_database_health
from app.core.settings import get_settings
from app.shared.scheduler import get_scheduler
from app.shared.utils.datetime_helpers import to_iso8601, utcnow

router = APIRouter()


@router.get(
    "/health",
    summary="Health check del backend",
    description=(
        "Estado básico del backend: conectividad a la base de datos, "
        "scheduler y sweeper de expiración de códigos."
    ),
)
async def health_check(request: Request) -> dict:
    settings = get_settings()

    db_ok = await check_database_health(timeout_s=2.0)
    sweeper = getattr(request.app.state, "code_expiry_sweeper", None)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": to_iso8601(utcnow()),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "scheduler": {
            "running": get_scheduler().is_running,
            "codeExpirySweeper": bool(sweeper and sweeper.is_running),
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }

# Fin del archivo app/routes/health_routes.py
