# -*- coding: utf-8 -*-
"""
app/modules/billing/metrics.py

Coleccionistas Prometheus de billing.

Autor: EcoPro
Fecha: 2026-10-11
"""
from prometheus_client import Counter

payment_webhooks_total = Counter(
    "payment_webhooks_total",
    "Webhooks del procesador por evento y resultado",
    labelnames=("event", "result"),  # result: success|ignored|error|rejected
)

__all__ = ["payment_webhooks_total"]

# Fin del archivo app/modules/billing/metrics.py
