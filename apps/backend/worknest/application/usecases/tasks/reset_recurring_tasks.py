"""
===============================================================================
USE CASE: Reset Recurring Tasks
===============================================================================

Devuelve a "pending" las tareas recurrentes cuyo ciclo terminó.

Cuándo una tarea está "due":
  - last_reset_on != hoy (marcador persistido => idempotente en el día), y
  - (a) está completada y la regla de recurrencia de su kind lo indica, o
  - (b) sigue pendiente, es daily/weekly/monthly, su deadline "HH:MM" ya
    pasó y desde él empezó un nuevo día / semana / mes (rollover: el
    historial la marca deadline_passed y el deadline pasa a hoy).

Reset:
  1. Snapshot best-effort en el historial (tarea + subtareas completadas).
  2. status/approval -> pending, se limpian campos de completación.
  3. Todas las subtareas -> pending / sin tildar.
  4. last_reset_on = hoy.

Fallas:
  - Error de mutación => ResetRecurringTasksError con el conteo parcial
    (lo ya reseteado no se revierte).
  - Presupuesto de tiempo agotado => corta y reporta truncated=True.
===============================================================================
"""

from __future__ import annotations

import time
from dataclasses import replace
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Callable, List, Optional
from uuid import uuid4

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_tasks_reset
from ....domain.entities import (
    DEADLINE_ROLLOVER_KINDS,
    RECURRING_TASK_KINDS,
    ApprovalStatus,
    Subtask,
    Task,
    TaskCompletion,
    TaskKind,
    TaskStatus,
    utcnow,
)
from ....domain.recurrence import check_recurrence, deadline_rollover_due, local_date
from ....domain.repositories import TaskHistoryRepository, TaskRepository
from .task_results import (
    ResetRecurringTasksError,
    ResetRecurringTasksResult,
    ResetScope,
    ResetScopeKind,
)


class _ResetReason(str, Enum):
    CYCLE_COMPLETED = "cycle_completed"
    DEADLINE_MISSED = "deadline_missed"


class ResetRecurringTasksUseCase:
    """Scheduler de tareas recurrentes (batch)."""

    def __init__(
        self,
        task_repository: TaskRepository,
        history_repository: TaskHistoryRepository,
        *,
        timezone: tzinfo,
        max_seconds: float,
        clock: Callable[[], datetime] = utcnow,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tasks = task_repository
        self._history = history_repository
        self._tz = timezone
        self._max_seconds = max_seconds
        self._clock = clock
        self._monotonic = monotonic

    def execute(self, scope: ResetScope | None = None) -> ResetRecurringTasksResult:
        scope = scope or ResetScope.all()
        started = self._monotonic()
        now = self._clock()
        today = local_date(now, self._tz)

        candidates = self._tasks.list_reset_candidates(
            sorted(RECURRING_TASK_KINDS, key=lambda k: k.value),
            assignee_id=scope.target_id if scope.kind is ResetScopeKind.USER else None,
            project_id=scope.target_id
            if scope.kind is ResetScopeKind.PROJECT
            else None,
        )

        reset_count = 0
        truncated = False
        for task in candidates:
            if self._monotonic() - started > self._max_seconds:
                truncated = True
                logger.warning(
                    "Reset de tareas recurrentes truncado por presupuesto de tiempo",
                    extra={
                        "reset_count": reset_count,
                        "max_seconds": self._max_seconds,
                    },
                )
                break

            reason = self._due_reason(task, now, today)
            if reason is None:
                continue

            try:
                self._reset(task, reason, now, today)
            except Exception as exc:
                logger.exception(
                    "Falló el reset de una tarea recurrente",
                    extra={"task_id": str(task.id), "reset_count": reset_count},
                )
                record_tasks_reset(reset_count)
                raise ResetRecurringTasksError(
                    f"Failed to reset task {task.id}: {exc}",
                    reset_count=reset_count,
                    original_error=exc,
                ) from exc
            reset_count += 1

        record_tasks_reset(reset_count)
        logger.info(
            "Tareas recurrentes reseteadas",
            extra={
                "scope": scope.kind.value,
                "candidates": len(candidates),
                "reset_count": reset_count,
                "truncated": truncated,
            },
        )
        return ResetRecurringTasksResult(
            reset_count=reset_count, scope=scope, truncated=truncated
        )

    # =========================================================
    # Decisión
    # =========================================================
    def _due_reason(
        self, task: Task, now: datetime, today: date
    ) -> Optional[_ResetReason]:
        if task.last_reset_on == today:
            return None

        if task.is_completed:
            check = check_recurrence(
                task.task_kind,
                task.last_completed_at,
                now=now,
                tz=self._tz,
                pattern=task.recurring_pattern,
                custom=task.custom_recurrence,
            )
            return _ResetReason.CYCLE_COMPLETED if check.should_reset else None

        if deadline_rollover_due(
            task.task_kind,
            task.deadline_date,
            task.deadline_time,
            now=now,
            tz=self._tz,
        ):
            return _ResetReason.DEADLINE_MISSED

        return None

    # =========================================================
    # Mutación
    # =========================================================
    def _reset(
        self, task: Task, reason: _ResetReason, now: datetime, today: date
    ) -> None:
        subtasks = self._tasks.list_subtasks(task.id)
        self._record_history(task, subtasks, reason, now)

        # R: Tras un reset, el deadline de daily/weekly/monthly queda >= hoy.
        moves_deadline = (
            reason is _ResetReason.DEADLINE_MISSED
            or (task.task_kind is TaskKind.DAILY and task.deadline_date is not None)
            or (
                task.task_kind in DEADLINE_ROLLOVER_KINDS
                and task.deadline_date is not None
                and task.deadline_date < today
            )
        )

        self._tasks.save_task(
            replace(
                task,
                status=TaskStatus.PENDING,
                approval_status=ApprovalStatus.PENDING,
                completed_at=None,
                completed_by=None,
                ticked_at=None,
                approved_by=None,
                approved_at=None,
                custom_field_values={},
                deadline_date=today if moves_deadline else task.deadline_date,
                last_reset_on=today,
                updated_at=now,
            )
        )
        if subtasks:
            self._tasks.reset_subtasks(task.id)

    def _record_history(
        self,
        task: Task,
        subtasks: List[Subtask],
        reason: _ResetReason,
        now: datetime,
    ) -> None:
        """Snapshot del ciclo que termina. Un fallo acá no bloquea el reset."""
        missed = reason is _ResetReason.DEADLINE_MISSED
        base = TaskCompletion(
            id=uuid4(),
            task_id=task.id,
            task_title=task.title,
            task_kind=task.task_kind,
            project_id=task.project_id,
            assigned_to=task.assigned_to,
            assignees=tuple(task.assignees),
            completed_by=task.completed_by,
            completed_at=task.completed_at,
            ticked_at=task.ticked_at,
            approval_status=ApprovalStatus.DEADLINE_PASSED
            if missed
            else task.approval_status,
            deadline_date=task.deadline_date,
            deadline_time=task.deadline_time,
            custom_field_values=dict(task.custom_field_values),
            not_ticked=missed,
            recorded_at=now,
        )

        try:
            self._history.append(base)
            for subtask in subtasks:
                if not subtask.is_completed:
                    continue
                self._history.append(
                    replace(
                        base,
                        id=uuid4(),
                        completed_by=subtask.completed_by,
                        completed_at=subtask.completed_at,
                        ticked_at=subtask.ticked_at,
                        subtask_id=subtask.id,
                        subtask_title=subtask.title,
                    )
                )
        except Exception:
            logger.exception(
                "No se pudo guardar el historial de la tarea",
                extra={"task_id": str(task.id)},
            )
