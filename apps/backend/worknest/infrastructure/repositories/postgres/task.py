"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/task.py
============================================================
Classes: PostgresTaskRepository, PostgresTaskHistoryRepository

Responsibilities:
  - Listar tareas candidatas a reset (por kind, asignado o proyecto).
  - Persistir el estado mutable de una tarea (status, completación,
    deadline, marcador last_reset_on).
  - Listar / resetear subtareas.
  - Agregar snapshots al historial (task_completions).
  - Mapear JSONB de recurrencia <-> RecurringPattern / CustomRecurrence.

Collaborators:
  - PostgresRepositoryBase
  - psycopg.types.json.Jsonb (parámetros JSONB)
  - domain.entities: Task, Subtask, TaskCompletion, patrones

Constraints / Notes:
  - Un JSON de recurrencia inválido se mapea a None (la regla de
    recurrencia lo trata como "patrón inválido" => sin reset).
============================================================
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from psycopg.types.json import Jsonb

from ....crosscutting.logger import logger
from ....domain.entities import (
    ApprovalStatus,
    CustomRecurrence,
    CustomRecurrenceType,
    RecurrenceFrequency,
    RecurringPattern,
    Subtask,
    Task,
    TaskCompletion,
    TaskKind,
    TaskStatus,
)
from .base import PostgresRepositoryBase

# =========================================================
# JSONB <-> patrones de recurrencia
# =========================================================


def pattern_from_json(data: Any) -> Optional[RecurringPattern]:
    if not isinstance(data, dict):
        return None
    try:
        return RecurringPattern(
            frequency=RecurrenceFrequency(data["frequency"]),
            interval=int(data["interval"]),
            days_of_week=tuple(int(d) for d in data.get("days_of_week") or ()),
            day_of_month=int(data["day_of_month"])
            if data.get("day_of_month")
            else None,
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("recurring_pattern inválido en DB", extra={"value": data})
        return None


def pattern_to_json(pattern: Optional[RecurringPattern]) -> Optional[Jsonb]:
    if pattern is None:
        return None
    return Jsonb(
        {
            "frequency": pattern.frequency.value,
            "interval": pattern.interval,
            "days_of_week": list(pattern.days_of_week),
            "day_of_month": pattern.day_of_month,
        }
    )


def custom_from_json(data: Any) -> Optional[CustomRecurrence]:
    if not isinstance(data, dict):
        return None
    try:
        return CustomRecurrence(
            type=CustomRecurrenceType(data["type"]),
            days=tuple(int(d) for d in data.get("days") or ()),
            recurring=bool(data.get("recurring", True)),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("custom_recurrence inválido en DB", extra={"value": data})
        return None


def custom_to_json(custom: Optional[CustomRecurrence]) -> Optional[Jsonb]:
    if custom is None:
        return None
    return Jsonb(
        {
            "type": custom.type.value,
            "days": list(custom.days),
            "recurring": custom.recurring,
        }
    )


# =========================================================
# Tasks
# =========================================================

_TASK_COLUMNS = """
    id, title, task_kind, project_id, assigned_to, assignees,
    status, approval_status, completed_at, completed_by, ticked_at,
    approved_by, approved_at, custom_field_values,
    deadline_date, deadline_time, recurring_pattern, custom_recurrence,
    last_reset_on, created_at, updated_at
"""

_SUBTASK_COLUMNS = (
    "id, task_id, title, status, ticked, completed_at, completed_by, ticked_at"
)


def _row_to_task(row: tuple) -> Task:
    (
        task_id,
        title,
        task_kind,
        project_id,
        assigned_to,
        assignees,
        status,
        approval_status,
        completed_at,
        completed_by,
        ticked_at,
        approved_by,
        approved_at,
        custom_field_values,
        deadline_date,
        deadline_time,
        recurring_pattern,
        custom_recurrence,
        last_reset_on,
        created_at,
        updated_at,
    ) = row

    return Task(
        id=task_id,
        title=title,
        task_kind=TaskKind(task_kind),
        project_id=project_id,
        assigned_to=assigned_to,
        assignees=list(assignees or []),
        status=TaskStatus(status),
        approval_status=ApprovalStatus(approval_status),
        completed_at=completed_at,
        completed_by=completed_by,
        ticked_at=ticked_at,
        approved_by=approved_by,
        approved_at=approved_at,
        custom_field_values=dict(custom_field_values or {}),
        deadline_date=deadline_date,
        deadline_time=deadline_time,
        recurring_pattern=pattern_from_json(recurring_pattern),
        custom_recurrence=custom_from_json(custom_recurrence),
        last_reset_on=last_reset_on,
        created_at=created_at,
        updated_at=updated_at,
    )


def _row_to_subtask(row: tuple) -> Subtask:
    return Subtask(
        id=row[0],
        task_id=row[1],
        title=row[2],
        status=TaskStatus(row[3]),
        ticked=bool(row[4]),
        completed_at=row[5],
        completed_by=row[6],
        ticked_at=row[7],
    )


class PostgresTaskRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de TaskRepository."""

    def list_reset_candidates(
        self,
        kinds: list[TaskKind],
        *,
        assignee_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> list[Task]:
        if not kinds:
            return []

        conditions: list[str] = ["task_kind = ANY(%s)"]
        params: list[object] = [[k.value for k in kinds]]

        if assignee_id is not None:
            conditions.append("(assigned_to = %s OR %s = ANY(assignees))")
            params.extend([assignee_id, assignee_id])
        if project_id is not None:
            conditions.append("project_id = %s")
            params.append(project_id)

        rows = self._fetchall(
            query=f"""
                SELECT {_TASK_COLUMNS}
                FROM tasks
                WHERE {" AND ".join(conditions)}
                ORDER BY created_at ASC NULLS LAST, id ASC
            """,
            params=params,
            context_msg="PostgresTaskRepository: list_reset_candidates failed",
            extra={"kinds": [k.value for k in kinds]},
        )
        return [_row_to_task(r) for r in rows]

    def list_subtasks(self, task_id: UUID) -> list[Subtask]:
        rows = self._fetchall(
            query=f"""
                SELECT {_SUBTASK_COLUMNS}
                FROM subtasks
                WHERE task_id = %s
                ORDER BY created_at ASC NULLS LAST, id ASC
            """,
            params=(task_id,),
            context_msg="PostgresTaskRepository: list_subtasks failed",
            extra={"task_id": str(task_id)},
        )
        return [_row_to_subtask(r) for r in rows]

    def save_task(self, task: Task) -> None:
        self._execute(
            query="""
                UPDATE tasks SET
                    status = %s,
                    approval_status = %s,
                    completed_at = %s,
                    completed_by = %s,
                    ticked_at = %s,
                    approved_by = %s,
                    approved_at = %s,
                    custom_field_values = %s,
                    deadline_date = %s,
                    deadline_time = %s,
                    recurring_pattern = %s,
                    custom_recurrence = %s,
                    last_reset_on = %s,
                    updated_at = COALESCE(%s, NOW())
                WHERE id = %s
            """,
            params=(
                task.status.value,
                task.approval_status.value,
                task.completed_at,
                task.completed_by,
                task.ticked_at,
                task.approved_by,
                task.approved_at,
                Jsonb(task.custom_field_values or {}),
                task.deadline_date,
                task.deadline_time,
                pattern_to_json(task.recurring_pattern),
                custom_to_json(task.custom_recurrence),
                task.last_reset_on,
                task.updated_at,
                task.id,
            ),
            context_msg="PostgresTaskRepository: save_task failed",
            extra={"task_id": str(task.id)},
        )

    def reset_subtasks(self, task_id: UUID) -> int:
        return self._execute(
            query="""
                UPDATE subtasks SET
                    status = %s,
                    ticked = FALSE,
                    completed_at = NULL,
                    completed_by = NULL,
                    ticked_at = NULL,
                    updated_at = NOW()
                WHERE task_id = %s
            """,
            params=(TaskStatus.PENDING.value, task_id),
            context_msg="PostgresTaskRepository: reset_subtasks failed",
            extra={"task_id": str(task_id)},
        )


# =========================================================
# Historial
# =========================================================

_COMPLETION_COLUMNS = """
    id, task_id, task_title, task_kind, project_id, assigned_to, assignees,
    completed_by, completed_at, ticked_at, approval_status,
    deadline_date, deadline_time, custom_field_values, not_ticked,
    recorded_at, subtask_id, subtask_title
"""


class PostgresTaskHistoryRepository(PostgresRepositoryBase):
    """R: Historial append-only de ciclos de tareas."""

    def append(self, record: TaskCompletion) -> None:
        self._execute(
            query=f"""
                INSERT INTO task_completions ({_COMPLETION_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s,
                        %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=(
                record.id,
                record.task_id,
                record.task_title,
                record.task_kind.value,
                record.project_id,
                record.assigned_to,
                list(record.assignees),
                record.completed_by,
                record.completed_at,
                record.ticked_at,
                record.approval_status.value,
                record.deadline_date,
                record.deadline_time,
                Jsonb(record.custom_field_values or {}),
                record.not_ticked,
                record.recorded_at,
                record.subtask_id,
                record.subtask_title,
            ),
            context_msg="PostgresTaskHistoryRepository: append failed",
            extra={"task_id": str(record.task_id)},
        )

    def list_for_task(self, task_id: UUID) -> list[TaskCompletion]:
        rows = self._fetchall(
            query=f"""
                SELECT {_COMPLETION_COLUMNS}
                FROM task_completions
                WHERE task_id = %s
                ORDER BY recorded_at DESC, id ASC
            """,
            params=(task_id,),
            context_msg="PostgresTaskHistoryRepository: list_for_task failed",
            extra={"task_id": str(task_id)},
        )
        return [
            TaskCompletion(
                id=r[0],
                task_id=r[1],
                task_title=r[2],
                task_kind=TaskKind(r[3]),
                project_id=r[4],
                assigned_to=r[5],
                assignees=tuple(r[6] or ()),
                completed_by=r[7],
                completed_at=r[8],
                ticked_at=r[9],
                approval_status=ApprovalStatus(r[10]),
                deadline_date=r[11],
                deadline_time=r[12],
                custom_field_values=dict(r[13] or {}),
                not_ticked=bool(r[14]),
                recorded_at=r[15],
                subtask_id=r[16],
                subtask_title=r[17],
            )
            for r in rows
        ]
