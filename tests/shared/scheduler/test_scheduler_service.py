# -*- coding: utf-8 -*-
"""
Tests para SchedulerService.

Cubre:
- Registro, reemplazo y eliminación de jobs a intervalo
- Estado de jobs (get_job_status / has_job)
- Arranque y parada idempotentes
- Singleton get_scheduler
"""

import pytest

from app.shared.scheduler import SchedulerService, get_scheduler


async def _noop():
    return None


def test_add_interval_job_replaces_existing():
    scheduler = SchedulerService()

    scheduler.add_interval_job(_noop, "job_a", seconds=30)
    scheduler.add_interval_job(_noop, "job_a", minutes=1)

    jobs = scheduler.get_jobs()
    assert [job["id"] for job in jobs] == ["job_a"]
    assert scheduler.has_job("job_a")


def test_remove_job_reports_missing():
    scheduler = SchedulerService()
    scheduler.add_interval_job(_noop, "job_b", seconds=5)

    assert scheduler.remove_job("job_b") is True
    assert scheduler.remove_job("job_b") is False
    assert scheduler.has_job("job_b") is False
    assert scheduler.get_job_status("job_b") is None


@pytest.mark.asyncio
async def test_start_and_shutdown_are_idempotent():
    scheduler = SchedulerService()
    scheduler.add_interval_job(_noop, "job_c", seconds=60)

    scheduler.start()
    scheduler.start()
    assert scheduler.is_running is True

    status = scheduler.get_job_status("job_c")
    assert status["id"] == "job_c"
    assert status["next_run"] is not None
    assert "interval" in status["trigger"]

    scheduler.shutdown(wait=False)
    scheduler.shutdown(wait=False)
    assert scheduler.is_running is False


def test_get_scheduler_is_singleton():
    assert get_scheduler() is get_scheduler()
