# -*- coding: utf-8 -*-
"""
app/observability/prom.py

Métricas HTTP Prometheus de EcoPro Billing.

Los routers se montan dos veces (capa /api y capa pública), así que la
ruta se etiqueta por plantilla sin el prefijo /api y la capa va en su
propio label: /api/codes/redeem y /codes/redeem comparten serie de ruta.
El propio /metrics no se instrumenta. Una excepción que escapa de la app
se cuenta como 500 antes de propagarse.

Los contadores de dominio (códigos emitidos, canjes, webhooks) viven en
el metrics.py de cada módulo y se exponen en el mismo /metrics.

Autor: EcoPro
Fecha: 2026-10-13
"""
from __future__ import annotations

import os
from time import perf_counter
from typing import Optional, Tuple

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from prometheus_client import (
    CollectorRegistry, multiprocess, generate_latest, CONTENT_TYPE_LATEST,
    Counter, Histogram,
)

METRICS_PATH = "/metrics"
API_PREFIX = "/api"

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "layer", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Latency per request (s)",
    ["method", "route", "layer"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


def route_labels(request: Request) -> Tuple[str, str]:
    """(plantilla de ruta sin /api, capa) de la petición."""
    route = getattr(request.scope.get("route"), "path", None)
    if route is None:
        return "unmatched", "none"
    if route == API_PREFIX or route.startswith(API_PREFIX + "/"):
        return route[len(API_PREFIX):] or "/", "api"
    return route, "public"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Cuenta y mide cada petición salvo el scrape de /metrics."""

    async def dispatch(self, request, call_next):
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        start = perf_counter()
        status = "500"
        try:
            resp = await call_next(request)
            status = str(resp.status_code)
            return resp
        finally:
            route, layer = route_labels(request)
            REQUEST_LATENCY.labels(request.method, route, layer).observe(perf_counter() - start)
            REQUEST_COUNT.labels(request.method, route, layer, status).inc()


def _build_registry() -> Optional[CollectorRegistry]:
    """Registry multiproceso cuando uvicorn corre con varios workers."""
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return registry
    return None


def mount_metrics(app: FastAPI, path: str = METRICS_PATH) -> None:
    registry = _build_registry()

    @app.get(path, include_in_schema=False)
    def metrics():
        data = generate_latest(registry) if registry else generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI) -> None:
    """Agrega el middleware y monta /metrics."""
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = ["PrometheusMiddleware", "mount_metrics", "route_labels", "setup_observability"]

# Fin del archivo app/observability/prom.py
