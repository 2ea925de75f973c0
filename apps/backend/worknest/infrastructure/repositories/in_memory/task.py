"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/task.py
============================================================
Classes: InMemoryTaskRepository, InMemoryTaskHistoryRepository

Responsibilities:
  - Almacenar tareas/subtareas en memoria con el mismo contrato que Postgres.
  - Filtro por kinds + asignado (assigned_to o assignees) + proyecto.
  - Orden estable por created_at (None al final) e id.

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias defensivas: los callers nunca reciben el objeto almacenado.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List
from uuid import UUID

from ....domain.entities import Subtask, Task, TaskCompletion, TaskKind, TaskStatus

_MIN = datetime.min.replace(tzinfo=timezone.utc)


def _copy_task(task: Task) -> Task:
    return replace(
        task,
        assignees=list(task.assignees),
        custom_field_values=dict(task.custom_field_values),
    )


class InMemoryTaskRepository:
    def __init__(self, tasks: Iterable[Task] = (), subtasks: Iterable[Subtask] = ()):
        self._lock = Lock()
        self._tasks: Dict[UUID, Task] = {t.id: _copy_task(t) for t in tasks}
        self._subtasks: Dict[UUID, Subtask] = {s.id: replace(s) for s in subtasks}

    # R: helpers de seed para tests
    def add_task(self, task: Task) -> None:
        with self._lock:
            self._tasks[task.id] = _copy_task(task)

    def add_subtask(self, subtask: Subtask) -> None:
        with self._lock:
            self._subtasks[subtask.id] = replace(subtask)

    def get_task(self, task_id: UUID) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            return _copy_task(task) if task else None

    def list_reset_candidates(
        self,
        kinds: List[TaskKind],
        *,
        assignee_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> List[Task]:
        wanted = set(kinds)
        with self._lock:
            selected = [
                _copy_task(t)
                for t in self._tasks.values()
                if t.task_kind in wanted
                and (assignee_id is None or t.is_assigned_to(assignee_id))
                and (project_id is None or t.project_id == project_id)
            ]
        return sorted(selected, key=lambda t: (t.created_at or _MIN, str(t.id)))

    def list_subtasks(self, task_id: UUID) -> List[Subtask]:
        with self._lock:
            return [replace(s) for s in self._subtasks.values() if s.task_id == task_id]

    def save_task(self, task: Task) -> None:
        with self._lock:
            self._tasks[task.id] = _copy_task(task)

    def reset_subtasks(self, task_id: UUID) -> int:
        count = 0
        with self._lock:
            for sub_id, sub in list(self._subtasks.items()):
                if sub.task_id != task_id:
                    continue
                self._subtasks[sub_id] = replace(
                    sub,
                    status=TaskStatus.PENDING,
                    ticked=False,
                    completed_at=None,
                    completed_by=None,
                    ticked_at=None,
                )
                count += 1
        return count


class InMemoryTaskHistoryRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._records: List[TaskCompletion] = []

    def append(self, record: TaskCompletion) -> None:
        with self._lock:
            self._records.append(record)

    def list_for_task(self, task_id: UUID) -> List[TaskCompletion]:
        with self._lock:
            records = [r for r in self._records if r.task_id == task_id]
        return sorted(records, key=lambda r: r.recorded_at, reverse=True)
