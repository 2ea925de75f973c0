"""
===============================================================================
SUBSISTEMA: Infraestructura / Queue
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Errores Tipados de Cola

Responsabilidades:
    - Distinguir configuración inválida (job path, rq ausente) de fallas al
      encolar (Redis caído) para que el script productor salga con un código
      claro.

Colaboradores:
    - rq_queue.RQMaintenanceQueue
    - scripts/enqueue_maintenance.py
===============================================================================
"""

from __future__ import annotations


class QueueError(Exception):
    """Error base del subsistema de colas."""

    code: str = "QUEUE_ERROR"


class QueueConfigurationError(QueueError):
    code = "QUEUE_CONFIGURATION_ERROR"


class QueueEnqueueError(QueueError):
    code = "QUEUE_ENQUEUE_ERROR"

    def __init__(
        self, message: str, *, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
