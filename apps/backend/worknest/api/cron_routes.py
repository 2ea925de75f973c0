"""
===============================================================================
TARJETA CRC — worknest/api/cron_routes.py (Triggers del scheduler externo)
===============================================================================

Responsabilidades:
  - POST /api/cron/reset-recurring-tasks: reset diario de tareas recurrentes.
  - GET  /api/cron/cleanup: limpieza por ventanas de retención.
  - Autorizar la llamada antes de ejecutar cualquier lógica batch.

Colaboradores:
  - identity.cron_auth.is_authorized_cron_call
  - container: casos de uso de mantenimiento
  - crosscutting.tracing.span / crosscutting.metrics.record_job_run

Reglas:
  - Reset: bearer CRON_SECRET o header marcador del scheduler ("1").
  - Cleanup: solo bearer CRON_SECRET.
  - Cuerpos JSON planos ({error, details, timestamp}): el orquestador los
    consume tal cual; no se usa RFC7807 acá.
===============================================================================
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..application.usecases.tasks import ResetRecurringTasksError
from ..container import (
    get_reset_recurring_tasks_use_case,
    get_run_retention_cleanup_use_case,
)
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_job_run
from ..crosscutting.tracing import span
from ..identity.cron_auth import SCHEDULER_MARKER_HEADER, is_authorized_cron_call
from .serializers import now_iso

router = APIRouter(prefix="/api/cron", tags=["cron"])

RESET_JOB = "reset_recurring_tasks_cron"
CLEANUP_JOB = "retention_cleanup_cron"


@router.post("/reset-recurring-tasks")
def reset_recurring_tasks(request: Request):
    if not is_authorized_cron_call(
        request.headers.get("authorization"),
        request.headers.get(SCHEDULER_MARKER_HEADER),
        allow_scheduler_marker=True,
    ):
        logger.warning("Cron de reset rechazado: credenciales inválidas")
        return JSONResponse(
            {
                "error": "Unauthorized - Cron job only",
                "details": "Missing or invalid cron credentials",
                "timestamp": now_iso(),
            },
            status_code=403,
        )

    logger.info("[Cron] Iniciando reset de tareas recurrentes")
    start = time.perf_counter()
    try:
        with span("cron.reset_recurring_tasks"):
            result = get_reset_recurring_tasks_use_case().execute()
    except ResetRecurringTasksError as exc:
        record_job_run(RESET_JOB, "failed", time.perf_counter() - start)
        return JSONResponse(
            {
                "error": "Failed to reset recurring tasks",
                "details": (
                    f"{exc.message} (reset {exc.reset_count} task(s) before failing)"
                ),
                "timestamp": now_iso(),
            },
            status_code=500,
        )
    except Exception as exc:
        record_job_run(RESET_JOB, "failed", time.perf_counter() - start)
        logger.exception("[Cron] Error reseteando tareas recurrentes")
        return JSONResponse(
            {
                "error": "Failed to reset recurring tasks",
                "details": str(exc),
                "timestamp": now_iso(),
            },
            status_code=500,
        )

    status = "partial" if result.truncated else "success"
    record_job_run(RESET_JOB, status, time.perf_counter() - start)
    return {
        "success": True,
        "resetCount": result.reset_count,
        "message": f"Successfully reset {result.reset_count} recurring task(s)",
        "truncated": result.truncated,
        "timestamp": now_iso(),
    }


@router.get("/cleanup")
def cleanup(request: Request):
    if not is_authorized_cron_call(
        request.headers.get("authorization"),
        None,
        allow_scheduler_marker=False,
    ):
        logger.warning("Cron de limpieza rechazado: credenciales inválidas")
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    start = time.perf_counter()
    try:
        with span("cron.retention_cleanup"):
            result = get_run_retention_cleanup_use_case().execute()
    except Exception as exc:
        record_job_run(CLEANUP_JOB, "failed", time.perf_counter() - start)
        logger.exception("Error en el cron de limpieza")
        return JSONResponse(
            {"error": "Cleanup failed", "details": str(exc)}, status_code=500
        )

    if not result.ok:
        record_job_run(CLEANUP_JOB, "partial", time.perf_counter() - start)
        details = "; ".join(f"{kind}: {err}" for kind, err in sorted(result.errors.items()))
        return JSONResponse(
            {"error": "Cleanup failed", "details": details, "results": result.counts()},
            status_code=500,
        )

    record_job_run(CLEANUP_JOB, "success", time.perf_counter() - start)
    return {
        "success": True,
        "message": "Cleanup completed successfully",
        "results": result.counts(),
    }
