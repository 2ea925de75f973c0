"""
===============================================================================
SUBSISTEMA: Infraestructura / Queue
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Rutas y Constantes de Jobs

Responsabilidades:
    - Centralizar el nombre de la cola de mantenimiento y las rutas
      importables de los jobs que ejecuta el worker.

Notas:
    - Si se mueve un job, se actualiza acá; RQMaintenanceQueue lo valida
      al construirse.
===============================================================================
"""

from __future__ import annotations

MAINTENANCE_QUEUE_NAME: str = "maintenance"

RESET_RECURRING_TASKS_JOB_PATH: str = "worknest.worker.jobs.reset_recurring_tasks_job"
RETENTION_CLEANUP_JOB_PATH: str = "worknest.worker.jobs.retention_cleanup_job"

MAINTENANCE_JOB_PATHS: tuple[str, ...] = (
    RESET_RECURRING_TASKS_JOB_PATH,
    RETENTION_CLEANUP_JOB_PATH,
)
