"""
===============================================================================
TASK USE CASE RESULTS
===============================================================================

Modelos compartidos del scheduler de tareas recurrentes:
  - ResetScope: alcance de una corrida (all / user / project).
  - ResetRecurringTasksResult: conteo + flag de truncado por presupuesto.
  - ResetRecurringTasksError: falla de mutación con el conteo parcial.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from ....crosscutting.exceptions import MaintenanceError


class ResetScopeKind(str, Enum):
    ALL = "all"
    USER = "user"
    PROJECT = "project"


@dataclass(frozen=True)
class ResetScope:
    kind: ResetScopeKind
    target_id: UUID | None = None

    @classmethod
    def all(cls) -> "ResetScope":
        return cls(ResetScopeKind.ALL)

    @classmethod
    def user(cls, user_id: UUID) -> "ResetScope":
        return cls(ResetScopeKind.USER, user_id)

    @classmethod
    def project(cls, project_id: UUID) -> "ResetScope":
        return cls(ResetScopeKind.PROJECT, project_id)


@dataclass(frozen=True)
class ResetRecurringTasksResult:
    reset_count: int
    scope: ResetScope
    truncated: bool = False


class ResetRecurringTasksError(MaintenanceError):
    """
    Una mutación falló a mitad de la corrida.

    reset_count: tareas ya reseteadas antes de la falla (no se revierten).
    """

    error_code: str = "RESET_RECURRING_TASKS_FAILED"

    def __init__(
        self,
        message: str,
        *,
        reset_count: int,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.reset_count = reset_count
