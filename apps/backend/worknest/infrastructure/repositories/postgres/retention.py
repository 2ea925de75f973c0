"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/retention.py
============================================================
Class: PostgresRetentionRepository

Responsibilities:
  - Borrados masivos por ventana de retención (un DELETE por kind).
  - Devolver cuántas filas se borraron.

Collaborators:
  - PostgresRepositoryBase
  - Tablas: project_meetings (DATE), employee_tasks, daily_updates
============================================================
"""

from __future__ import annotations

from datetime import date, datetime

from .base import PostgresRepositoryBase


class PostgresRetentionRepository(PostgresRepositoryBase):
    def delete_meetings_before(self, day: date) -> int:
        return self._execute(
            query="DELETE FROM project_meetings WHERE meeting_date < %s",
            params=(day,),
            context_msg="PostgresRetentionRepository: delete meetings failed",
            extra={"before": day.isoformat()},
        )

    def delete_completed_employee_tasks_before(self, cutoff: datetime) -> int:
        return self._execute(
            query="""
                DELETE FROM employee_tasks
                WHERE completed = TRUE AND completed_at < %s
            """,
            params=(cutoff,),
            context_msg="PostgresRetentionRepository: delete employee tasks failed",
            extra={"before": cutoff.isoformat()},
        )

    def delete_daily_updates_before(self, cutoff: datetime) -> int:
        return self._execute(
            query="DELETE FROM daily_updates WHERE created_at < %s",
            params=(cutoff,),
            context_msg="PostgresRetentionRepository: delete daily updates failed",
            extra={"before": cutoff.isoformat()},
        )
