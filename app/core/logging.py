# -*- coding: utf-8 -*-
"""
app/core/logging.py

Fachada del módulo `app.shared.config.logging_config` para mantener un
punto de entrada único bajo `app.core`.

Autor: EcoPro
Fecha: 2026-10-02
"""

from app.shared.config.logging_config import LogFormat, LogLevel
from app.shared.config.logging_config import setup_logging as _setup_logging


def setup_logging(level: LogLevel = "INFO", fmt: LogFormat = "plain", service: str = "EcoPro Billing") -> None:
    """Configura el sistema de logging de la aplicación."""
    _setup_logging(level=level, fmt=fmt, service=service)

# Fin del archivo app/core/logging.py
