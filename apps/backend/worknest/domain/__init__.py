"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/api.
    - Mantener estable el "surface area" del dominio.

Colaboradores:
    - domain.entities: entidades (Task, EmployeePermission, ...)
    - domain.repositories: puertos de persistencia
    - domain.recurrence: reglas puras de reset

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    ApprovalStatus,
    CustomRecurrence,
    CustomRecurrenceType,
    DailyUpdate,
    EmployeePermission,
    EmployeeTask,
    Meeting,
    RecurrenceFrequency,
    RecurringPattern,
    Subtask,
    Task,
    TaskCompletion,
    TaskKind,
    TaskStatus,
)
from .recurrence import (
    RecurrenceCheck,
    check_recurrence,
    deadline_moment,
    deadline_passed,
    deadline_rollover_due,
    should_reset,
)
from .repositories import (
    EmployeePermissionRepository,
    RetentionRepository,
    TaskHistoryRepository,
    TaskRepository,
    UserRepository,
)

__all__ = [
    # Entities
    "EmployeePermission",
    "Task",
    "Subtask",
    "TaskCompletion",
    "TaskKind",
    "TaskStatus",
    "ApprovalStatus",
    "RecurringPattern",
    "RecurrenceFrequency",
    "CustomRecurrence",
    "CustomRecurrenceType",
    "Meeting",
    "EmployeeTask",
    "DailyUpdate",
    # Recurrence rules
    "RecurrenceCheck",
    "check_recurrence",
    "should_reset",
    "deadline_passed",
    "deadline_moment",
    "deadline_rollover_due",
    # Repository Interfaces (Ports)
    "UserRepository",
    "EmployeePermissionRepository",
    "TaskRepository",
    "TaskHistoryRepository",
    "RetentionRepository",
]
