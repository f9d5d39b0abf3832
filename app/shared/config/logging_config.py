# -*- coding: utf-8 -*-
"""
app/shared/config/logging_config.py

Logging de EcoPro Billing.

- plain: una línea por registro, para desarrollo y tests
- pretty: plain con archivo:línea, útil al depurar el sweeper y webhooks
- json: un objeto por registro (python-json-logger) con el campo fijo
  `service`, para producción

Las librerías que registran cada query, request o ejecución de job se
fijan en WARNING salvo que el nivel raíz sea DEBUG.

Autor: EcoPro
Fecha: 2026-10-02
"""

import logging.config
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["plain", "pretty", "json"]

# Una línea por query / request saliente / ejecución de job
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore", "apscheduler")

_FORMATS = {
    "plain": "%(asctime)s %(levelname)s [%(name)s]: %(message)s",
    "pretty": "%(asctime)s %(levelname)-8s [%(name)s] %(filename)s:%(lineno)d %(message)s",
}


def _formatter(fmt: LogFormat, service: str) -> dict:
    if fmt == "json":
        return {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "static_fields": {"service": service},
        }
    return {"format": _FORMATS.get(fmt, _FORMATS["plain"])}


def setup_logging(
    level: LogLevel = "INFO",
    fmt: LogFormat = "plain",
    service: str = "EcoPro Billing",
) -> None:
    """
    Configura el logging raíz de la aplicación.

    Args:
        level: nivel del logger raíz
        fmt: plain, pretty o json
        service: valor del campo `service` en formato json

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json", service="EcoPro Billing")
    """
    level = level.upper()
    library_level = "DEBUG" if level == "DEBUG" else "WARNING"

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"app": _formatter(fmt, service)},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "app",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {name: {"level": library_level} for name in _NOISY_LOGGERS},
    })


__all__ = ["LogFormat", "LogLevel", "setup_logging"]
# Fin del archivo app/shared/config/logging_config.py
