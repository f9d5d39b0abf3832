# -*- coding: utf-8 -*-
"""
app/shared/scheduler/__init__.py

Sistema de jobs programados usando APScheduler.

Autor: EcoPro
Fecha: 2026-10-04
"""

from .scheduler_service import SchedulerService, get_scheduler

__all__ = [
    "SchedulerService",
    "get_scheduler",
]
