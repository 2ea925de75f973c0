"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (permisos, tareas recurrentes, registros con retención)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples
      (qué es "recurrente", cuándo una tarea está completada).
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - domain.recurrence: evalúa RecurringPattern / CustomRecurrence.
    - application/usecases: construyen/consumen estas entidades.

Principios:
    - Sin dependencias a DB/Redis/FastAPI.
    - Días de la semana con convención 0=domingo .. 6=sábado (contrato de datos).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID


def utcnow() -> datetime:
    """Fecha/hora UTC (reloj por defecto de los casos de uso)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Permisos granulares
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmployeePermission:
    """
    Grant de permisos de un empleado (a lo sumo uno por employee_id).

    permissions guarda nombres del catálogo (identity.permissions.Permission).
    """

    employee_id: UUID
    permissions: Tuple[str, ...] = ()
    granted_by: Optional[UUID] = None
    granted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Tareas recurrentes
# ---------------------------------------------------------------------------


class TaskKind(str, Enum):
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    RECURRING = "recurring"
    CUSTOM = "custom"


RECURRING_TASK_KINDS: frozenset[TaskKind] = frozenset(
    {
        TaskKind.DAILY,
        TaskKind.WEEKLY,
        TaskKind.MONTHLY,
        TaskKind.RECURRING,
        TaskKind.CUSTOM,
    }
)

# Kinds con rollover por deadline vencido (la tarea no se tildó a tiempo).
DEADLINE_ROLLOVER_KINDS: frozenset[TaskKind] = frozenset(
    {TaskKind.DAILY, TaskKind.WEEKLY, TaskKind.MONTHLY}
)


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEADLINE_PASSED = "deadline_passed"


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class RecurringPattern:
    """Patrón de kind=recurring: cada `interval` días/semanas/meses."""

    frequency: RecurrenceFrequency
    interval: int
    days_of_week: Tuple[int, ...] = ()
    day_of_month: Optional[int] = None


class CustomRecurrenceType(str, Enum):
    DAYS_OF_WEEK = "days_of_week"
    DAYS_OF_MONTH = "days_of_month"


@dataclass(frozen=True)
class CustomRecurrence:
    """Recurrencia de kind=custom: días puntuales de la semana o del mes."""

    type: CustomRecurrenceType
    days: Tuple[int, ...] = ()
    recurring: bool = True


@dataclass
class Subtask:
    id: UUID
    task_id: UUID
    title: str
    status: TaskStatus = TaskStatus.PENDING
    ticked: bool = False
    completed_at: Optional[datetime] = None
    completed_by: Optional[UUID] = None
    ticked_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass
class Task:
    """
    Tarea de un proyecto. Las de kind recurrente funcionan como plantilla:
    el scheduler las devuelve a "pending" en cada ciclo.
    """

    id: UUID
    title: str
    task_kind: TaskKind
    project_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = None
    assignees: List[UUID] = field(default_factory=list)

    status: TaskStatus = TaskStatus.PENDING
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    completed_at: Optional[datetime] = None
    completed_by: Optional[UUID] = None
    ticked_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    custom_field_values: Dict[str, Any] = field(default_factory=dict)

    deadline_date: Optional[date] = None
    deadline_time: Optional[str] = None  # "HH:MM" en la zona horaria de la app

    recurring_pattern: Optional[RecurringPattern] = None
    custom_recurrence: Optional[CustomRecurrence] = None

    # Marcador persistido de idempotencia del scheduler.
    last_reset_on: Optional[date] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.task_kind in RECURRING_TASK_KINDS

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def last_completed_at(self) -> Optional[datetime]:
        return self.completed_at or self.ticked_at

    def is_assigned_to(self, user_id: UUID) -> bool:
        return self.assigned_to == user_id or user_id in self.assignees


@dataclass(frozen=True)
class TaskCompletion:
    """Snapshot histórico de un ciclo de tarea (se guarda antes del reset)."""

    id: UUID
    task_id: UUID
    task_title: str
    task_kind: TaskKind
    project_id: Optional[UUID]
    assigned_to: Optional[UUID]
    assignees: Tuple[UUID, ...]
    completed_by: Optional[UUID]
    completed_at: Optional[datetime]
    ticked_at: Optional[datetime]
    approval_status: ApprovalStatus
    deadline_date: Optional[date]
    deadline_time: Optional[str]
    custom_field_values: Dict[str, Any]
    not_ticked: bool
    recorded_at: datetime
    subtask_id: Optional[UUID] = None
    subtask_title: Optional[str] = None


# ---------------------------------------------------------------------------
# Registros con ventana de retención
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Meeting:
    """Reunión de proyecto. meeting_date no tiene hora (granularidad día)."""

    id: UUID
    project_id: Optional[UUID]
    title: str
    meeting_date: date


@dataclass(frozen=True)
class EmployeeTask:
    """Tarea personal de un empleado (no recurrente)."""

    id: UUID
    employee_id: UUID
    title: str
    completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DailyUpdate:
    id: UUID
    employee_id: UUID
    project_id: Optional[UUID]
    created_at: datetime
    summary: str = ""
