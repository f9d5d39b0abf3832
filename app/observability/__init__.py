# -*- coding: utf-8 -*-
"""
app/observability/__init__.py

Autor: EcoPro
Fecha: 2026-10-13
"""

from .prom import PrometheusMiddleware, mount_metrics, route_labels, setup_observability

__all__ = ["PrometheusMiddleware", "mount_metrics", "route_labels", "setup_observability"]
