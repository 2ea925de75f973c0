"""
===============================================================================
TARJETA CRC — worker/jobs.py (Jobs RQ de mantenimiento)
===============================================================================

Responsabilidades:
  - Definir los entrypoints ejecutados por RQ:
      * reset_recurring_tasks_job: reset diario de tareas recurrentes.
      * retention_cleanup_job: limpieza por ventanas de retención.
  - Construir los casos de uso desde el contenedor.
  - Emitir logs/métricas/tracing con contexto consistente.
  - Garantizar limpieza de contexto al finalizar (éxito o fallo).

Patrones aplicados:
  - Command (Job): función como comando a ejecutar por el worker.
  - Fail-loud: un fallo se relanza para que RQ aplique su política de retry
    (ambos jobs son idempotentes).

Colaboradores:
  - container.get_reset_recurring_tasks_use_case / get_run_retention_cleanup_use_case
  - crosscutting.metrics.record_job_run
  - crosscutting.tracing.span
  - context.bind_job_context / clear_context
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable

from rq import get_current_job

from ..container import (
    get_reset_recurring_tasks_use_case,
    get_run_retention_cleanup_use_case,
)
from ..context import bind_job_context, clear_context
from ..crosscutting.exceptions import MaintenanceError
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_job_run
from ..crosscutting.tracing import span

RESET_RECURRING_TASKS_JOB = "rq.reset_recurring_tasks_job"
RETENTION_CLEANUP_JOB = "rq.retention_cleanup_job"


def _run_job(job_name: str, body: Callable[[], tuple[str, dict[str, Any]]]) -> dict[str, Any]:
    """
    Envuelve un job con contexto, span, métricas y logs de inicio/fin.

    `body` devuelve (status, summary); status ∈ {"success", "partial"}.
    """
    job = get_current_job()
    job_id = getattr(job, "id", None)
    bind_job_context(run_id=job_id or str(uuid.uuid4()), job_name=job_name)

    start = time.perf_counter()
    status = "failed"
    summary: dict[str, Any] = {}

    logger.info("Worker job iniciado", extra={"job_id": job_id})
    try:
        with span(f"worker.{job_name}", {"job_id": job_id or ""}):
            status, summary = body()
        return summary
    except Exception as exc:
        logger.exception(
            "Worker job falló con excepción",
            extra={"job_id": job_id, "error": str(exc)},
        )
        raise
    finally:
        duration = time.perf_counter() - start
        record_job_run(job_name, status, duration)
        logger.info(
            "Worker job finalizado",
            extra={
                "job_id": job_id,
                "status": status,
                "duration_seconds": round(duration, 3),
                **summary,
            },
        )
        clear_context()


def reset_recurring_tasks_job() -> dict[str, Any]:
    """Job RQ: resetea las tareas recurrentes vencidas (scope all)."""

    def body() -> tuple[str, dict[str, Any]]:
        result = get_reset_recurring_tasks_use_case().execute()
        summary = {"reset_count": result.reset_count, "truncated": result.truncated}
        return ("partial" if result.truncated else "success"), summary

    return _run_job(RESET_RECURRING_TASKS_JOB, body)


def retention_cleanup_job() -> dict[str, Any]:
    """
    Job RQ: limpieza por retención.

    Si algún tipo falla se relanza como MaintenanceError (los demás ya corrieron).
    """

    def body() -> tuple[str, dict[str, Any]]:
        result = get_run_retention_cleanup_use_case().execute()
        if not result.ok:
            raise MaintenanceError(
                "Cleanup failed for: " + ", ".join(sorted(result.errors))
            )
        return "success", result.counts()

    return _run_job(RETENTION_CLEANUP_JOB, body)


__all__ = ["reset_recurring_tasks_job", "retention_cleanup_job"]
