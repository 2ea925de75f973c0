# apps/backend/worknest/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  WorkNestError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/repositories/postgres/* (DatabaseError)
  - application/usecases/tasks (MaintenanceError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class WorkNestError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "WORKNEST_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class DatabaseError(WorkNestError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class MaintenanceError(WorkNestError):
    """Falla de un proceso batch (reset de tareas recurrentes, limpieza)."""

    error_code: str = "MAINTENANCE_ERROR"
