# -*- coding: utf-8 -*-
"""
app/shared/http_utils/request_meta.py

Helpers para extraer metadatos de request (IP, User-Agent) detrás de
proxies. Se usan para auditar intentos de validación de códigos.

Autor: EcoPro
Fecha: 2026-10-05
"""
from __future__ import annotations

import os
from typing import Optional

from starlette.requests import Request

# Columnas de auditoría (code_validation_attempts)
MAX_IP_LENGTH = 64
MAX_USER_AGENT_LENGTH = 255


def _trust_proxy_headers() -> bool:
    """
    TRUST_PROXY_HEADERS=true solo cuando la app corre detrás de un proxy
    propio; por defecto se usa la IP del socket.
    """
    return os.getenv("TRUST_PROXY_HEADERS", "false").lower() in ("true", "1", "yes")


def get_client_ip(request: Request) -> Optional[str]:
    """
    IP del cliente.

    Con TRUST_PROXY_HEADERS: primer valor de X-Forwarded-For, luego X-Real-IP.
    Sin él: request.client.host. None si no se puede determinar.
    """
    if _trust_proxy_headers():
        xff = request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[0].strip()[:MAX_IP_LENGTH]
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()[:MAX_IP_LENGTH]

    if request.client and request.client.host:
        return request.client.host[:MAX_IP_LENGTH]
    return None


def get_user_agent(request: Request) -> Optional[str]:
    """User-Agent recortado al tamaño de la columna, o None."""
    ua = request.headers.get("user-agent")
    return ua.strip()[:MAX_USER_AGENT_LENGTH] if ua else None


def get_request_meta(request: Request) -> dict:
    """Dict con ip_address y user_agent para auditoría."""
    return {
        "ip_address": get_client_ip(request),
        "user_agent": get_user_agent(request),
    }


__all__ = [
    "get_client_ip",
    "get_user_agent",
    "get_request_meta",
]
