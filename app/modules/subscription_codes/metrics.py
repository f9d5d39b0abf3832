# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/metrics.py

Coleccionistas Prometheus del ciclo de vida de códigos.

Autor: EcoPro
Fecha: 2026-10-08
"""
from prometheus_client import Counter

SUBSYSTEM = "subscription_codes"

codes_issued_total = Counter(
    f"{SUBSYSTEM}_issued_total",
    "Códigos emitidos por vendedores",
)

code_redemptions_total = Counter(
    "subscription_code_redemptions_total",
    "Intentos de canje por resultado",
    labelnames=("outcome",),  # success|invalid|expired|already_used|rate_limited|failed
)

codes_expired_total = Counter(
    f"{SUBSYSTEM}_expired_total",
    "Códigos expirados por el sweeper",
)

__all__ = [
    "codes_issued_total",
    "code_redemptions_total",
    "codes_expired_total",
]

# Fin del archivo app/modules/subscription_codes/metrics.py
