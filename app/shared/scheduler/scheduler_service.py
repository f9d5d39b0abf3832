# -*- coding: utf-8 -*-
"""
app/shared/scheduler/scheduler_service.py

Servicio de programación de tareas periódicas usando APScheduler.

Autor: EcoPro
Fecha: 2026-10-04
"""

import logging
from typing import Any, Callable, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Servicio de programación de tareas periódicas.

    - Jobs a intervalo fijo sobre el event loop de la app
    - Registro y eliminación dinámica de jobs
    - Una sola instancia por job (las ejecuciones nunca se solapan)
    """

    def __init__(self, misfire_grace_time: int = 30):
        job_defaults = {
            "coalesce": True,  # Combinar ejecuciones perdidas
            "max_instances": 1,  # Una instancia por job
            "misfire_grace_time": misfire_grace_time,
        }

        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults=job_defaults,
            timezone="UTC",
        )
        self._started = False
        logger.debug("SchedulerService inicializado")

    def start(self) -> None:
        """Inicia el scheduler (idempotente)."""
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("SchedulerService iniciado")

    def shutdown(self, wait: bool = True) -> None:
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("SchedulerService detenido")

    def add_interval_job(
        self,
        func: Callable[..., Any],
        job_id: str,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        **kwargs: Any,
    ) -> str:
        """
        Agrega (o reemplaza) un job que se ejecuta a intervalos regulares.

        Args:
            func: Función o corrutina a ejecutar
            job_id: ID único del job
            hours / minutes / seconds: Intervalo
            **kwargs: Argumentos adicionales para func

        Returns:
            ID del job agregado
        """
        trigger = IntervalTrigger(hours=hours, minutes=minutes, seconds=seconds)

        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )

        logger.info("Job '%s' agregado: cada %dh %dm %ds", job_id, hours, minutes, seconds)
        return job_id

    def remove_job(self, job_id: str) -> bool:
        """
        Elimina un job programado.

        Returns:
            True si se eliminó, False si no existía
        """
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug("Job '%s' no estaba registrado", job_id)
            return False
        logger.info("Job '%s' eliminado", job_id)
        return True

    def has_job(self, job_id: str) -> bool:
        return self._scheduler.get_job(job_id) is not None

    def get_jobs(self) -> list[dict]:
        """Lista de jobs programados con información básica."""
        # Los jobs pendientes (scheduler sin arrancar) aún no tienen next_run_time
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": getattr(job, "next_run_time", None),
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_job_status(self, job_id: str) -> Optional[dict]:
        """Estado de un job específico o None si no existe."""
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        return {
            "id": job.id,
            "name": job.name,
            "next_run": getattr(job, "next_run_time", None),
            "trigger": str(job.trigger),
            "pending": job.pending,
        }

    @property
    def is_running(self) -> bool:
        """Retorna True si el scheduler está activo."""
        return self._started and self._scheduler.running


# Singleton global del scheduler
_scheduler_instance: Optional[SchedulerService] = None


def get_scheduler() -> SchedulerService:
    """
    Obtiene la instancia global del scheduler (singleton).
    """
    global _scheduler_instance
    if _scheduler_instance is None:
        _scheduler_instance = SchedulerService()
    return _scheduler_instance


# Fin del archivo app/shared/scheduler/scheduler_service.py
