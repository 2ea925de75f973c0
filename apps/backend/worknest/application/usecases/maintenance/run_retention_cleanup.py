"""
===============================================================================
USE CASE: Run Retention Cleanup
===============================================================================

Borra (sin soft-delete) los registros que superaron su ventana de retención.

Ventanas (constantes, no configurables):
  - meetings: cuando su día completo ya pasó (meeting_date < hoy en la zona
    horaria de la app).
  - employee tasks completadas: completed_at < ahora - 30 días.
  - daily updates: created_at < ahora - 90 días.

Aislamiento:
  - Cada kind corre por separado: si uno falla, su conteo queda en 0, el
    error se registra en `errors` y los demás kinds igual se ejecutan.
  - Re-ejecutar sin registros elegibles es un no-op (todo en 0).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Dict

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_records_deleted
from ....domain.entities import utcnow
from ....domain.recurrence import local_date
from ....domain.repositories import RetentionRepository

COMPLETED_TASK_RETENTION = timedelta(days=30)
DAILY_UPDATE_RETENTION = timedelta(days=90)

KIND_MEETINGS = "meetings"
KIND_COMPLETED_TASKS = "completed_tasks"
KIND_DAILY_UPDATES = "daily_updates"


@dataclass
class CleanupResult:
    deleted_meetings: int = 0
    deleted_completed_tasks: int = 0
    deleted_old_updates: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def counts(self) -> Dict[str, int]:
        """Forma pública de los conteos (contrato JSON de la API)."""
        return {
            "deletedMeetings": self.deleted_meetings,
            "deletedCompletedTasks": self.deleted_completed_tasks,
            "deletedOldUpdates": self.deleted_old_updates,
        }


class RunRetentionCleanupUseCase:
    def __init__(
        self,
        retention_repository: RetentionRepository,
        *,
        timezone: tzinfo,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repo = retention_repository
        self._tz = timezone
        self._clock = clock

    def execute(self) -> CleanupResult:
        now = self._clock()
        today = local_date(now, self._tz)
        result = CleanupResult()

        result.deleted_meetings = self._run_kind(
            result, KIND_MEETINGS, lambda: self._repo.delete_meetings_before(today)
        )
        result.deleted_completed_tasks = self._run_kind(
            result,
            KIND_COMPLETED_TASKS,
            lambda: self._repo.delete_completed_employee_tasks_before(
                now - COMPLETED_TASK_RETENTION
            ),
        )
        result.deleted_old_updates = self._run_kind(
            result,
            KIND_DAILY_UPDATES,
            lambda: self._repo.delete_daily_updates_before(
                now - DAILY_UPDATE_RETENTION
            ),
        )

        log_extra = {**result.counts(), "failed_kinds": sorted(result.errors)}
        if result.ok:
            logger.info("Limpieza de retención completada", extra=log_extra)
        else:
            logger.error("Limpieza de retención con fallas", extra=log_extra)
        return result

    @staticmethod
    def _run_kind(
        result: CleanupResult, kind: str, delete: Callable[[], int]
    ) -> int:
        try:
            deleted = int(delete() or 0)
        except Exception as exc:
            logger.exception(
                "Falló la limpieza de un tipo de registro", extra={"kind": kind}
            )
            result.errors[kind] = str(exc)
            return 0

        record_records_deleted(kind, deleted)
        return deleted
