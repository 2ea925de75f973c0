"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/retention.py
============================================================
Class: InMemoryRetentionRepository

Responsibilities:
  - Guardar meetings, employee tasks y daily updates en memoria.
  - Implementar los borrados por ventana con los mismos predicados que SQL.

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
============================================================
"""

from __future__ import annotations

from datetime import date, datetime
from threading import Lock
from typing import Dict, List
from uuid import UUID

from ....domain.entities import DailyUpdate, EmployeeTask, Meeting


class InMemoryRetentionRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._meetings: Dict[UUID, Meeting] = {}
        self._employee_tasks: Dict[UUID, EmployeeTask] = {}
        self._daily_updates: Dict[UUID, DailyUpdate] = {}

    # R: helpers de seed / inspección para tests
    def add_meeting(self, meeting: Meeting) -> None:
        with self._lock:
            self._meetings[meeting.id] = meeting

    def add_employee_task(self, task: EmployeeTask) -> None:
        with self._lock:
            self._employee_tasks[task.id] = task

    def add_daily_update(self, update: DailyUpdate) -> None:
        with self._lock:
            self._daily_updates[update.id] = update

    def list_meetings(self) -> List[Meeting]:
        with self._lock:
            return list(self._meetings.values())

    def list_employee_tasks(self) -> List[EmployeeTask]:
        with self._lock:
            return list(self._employee_tasks.values())

    def list_daily_updates(self) -> List[DailyUpdate]:
        with self._lock:
            return list(self._daily_updates.values())

    # R: contrato RetentionRepository
    def delete_meetings_before(self, day: date) -> int:
        with self._lock:
            expired = [k for k, m in self._meetings.items() if m.meeting_date < day]
            for key in expired:
                del self._meetings[key]
        return len(expired)

    def delete_completed_employee_tasks_before(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [
                k
                for k, t in self._employee_tasks.items()
                if t.completed and t.completed_at is not None and t.completed_at < cutoff
            ]
            for key in expired:
                del self._employee_tasks[key]
        return len(expired)

    def delete_daily_updates_before(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [
                k for k, u in self._daily_updates.items() if u.created_at < cutoff
            ]
            for key in expired:
                del self._daily_updates[key]
        return len(expired)
