"""
===============================================================================
ARCHIVO: infrastructure/queue/rq_queue.py
===============================================================================

CRC CARD (Class)
-------------------------------------------------------------------------------
Clase:
    RQMaintenanceQueue (Adapter)

Responsabilidades:
    - Encolar los jobs de mantenimiento (reset de recurrentes, limpieza por
      retención) en la cola RQ `maintenance`.
    - Validar configuración (nombre de cola, job paths importables) en modo
      fail-fast.
    - Encapsular rq/redis para que no se filtren a la capa de aplicación.

Colaboradores:
    - job_paths.*
    - import_utils.is_importable_dotted_path
    - errors.QueueConfigurationError / QueueEnqueueError
    - crosscutting.logger

Patrones:
    - Adapter + Fail-Fast + Lazy Import (rq solo si se usa).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...crosscutting.logger import logger
from .errors import QueueConfigurationError, QueueEnqueueError
from .import_utils import is_importable_dotted_path
from .job_paths import (
    MAINTENANCE_JOB_PATHS,
    MAINTENANCE_QUEUE_NAME,
    RESET_RECURRING_TASKS_JOB_PATH,
    RETENTION_CLEANUP_JOB_PATH,
)


@dataclass(frozen=True)
class RQQueueConfig:
    """Configuración del adaptador RQ.

    queue_name:
        Nombre de la cola en Redis.
    retry_max_attempts:
        Reintentos automáticos si el job falla (0 = sin retry).
    job_timeout_seconds:
        Timeout máximo de ejecución del job en el worker.
    result_ttl_seconds:
        Tiempo de vida del resultado del job en Redis.
    """

    queue_name: str = MAINTENANCE_QUEUE_NAME
    retry_max_attempts: int = 3
    job_timeout_seconds: int = 600
    result_ttl_seconds: int = 3600


class RQMaintenanceQueue:
    """Adapter RQ para los jobs batch de mantenimiento."""

    def __init__(self, *, redis: Any, config: RQQueueConfig) -> None:
        self._config = _validate_config(config)

        for path in MAINTENANCE_JOB_PATHS:
            if not is_importable_dotted_path(path):
                raise QueueConfigurationError(
                    f"Job path no importable para RQ: {path}. "
                    "Revisar `infrastructure/queue/job_paths.py` y `worker/jobs.py`."
                )

        self._rq = _lazy_import_rq()
        self._queue = self._rq.Queue(name=self._config.queue_name, connection=redis)

        self._retry = None
        if self._config.retry_max_attempts > 0:
            self._retry = self._rq.Retry(max=self._config.retry_max_attempts)

        logger.info(
            "RQ inicializada",
            extra={
                "queue": self._config.queue_name,
                "retry_max_attempts": self._config.retry_max_attempts,
                "job_timeout_seconds": self._config.job_timeout_seconds,
            },
        )

    @property
    def queue_name(self) -> str:
        return self._config.queue_name

    def enqueue_reset_recurring_tasks(self) -> str:
        return self._enqueue(RESET_RECURRING_TASKS_JOB_PATH, "reset_recurring_tasks")

    def enqueue_retention_cleanup(self) -> str:
        return self._enqueue(RETENTION_CLEANUP_JOB_PATH, "retention_cleanup")

    def _enqueue(self, job_path: str, description: str) -> str:
        try:
            job = self._queue.enqueue(
                job_path,
                retry=self._retry,
                job_timeout=self._config.job_timeout_seconds,
                result_ttl=self._config.result_ttl_seconds,
                description=description,
            )
        except Exception as exc:
            logger.exception(
                "Error al encolar job de mantenimiento",
                extra={"job": description, "queue": self._config.queue_name},
            )
            raise QueueEnqueueError(
                f"No se pudo encolar el job {description}", original_error=exc
            ) from exc

        job_id = str(getattr(job, "id", "") or "")
        logger.info(
            "Job de mantenimiento encolado",
            extra={
                "job": description,
                "job_id": job_id,
                "queue": self._config.queue_name,
            },
        )
        return job_id


# -----------------------------------------------------------------------------
# Helpers privados (módulo)
# -----------------------------------------------------------------------------


def _validate_config(config: RQQueueConfig) -> RQQueueConfig:
    queue_name = (config.queue_name or "").strip() or MAINTENANCE_QUEUE_NAME
    retry_max_attempts = int(config.retry_max_attempts)
    job_timeout_seconds = int(config.job_timeout_seconds)
    result_ttl_seconds = int(config.result_ttl_seconds)

    if retry_max_attempts < 0:
        raise QueueConfigurationError("retry_max_attempts no puede ser negativo")
    if job_timeout_seconds <= 0:
        raise QueueConfigurationError("job_timeout_seconds debe ser > 0")
    if result_ttl_seconds < 0:
        raise QueueConfigurationError("result_ttl_seconds no puede ser negativo")

    return RQQueueConfig(
        queue_name=queue_name,
        retry_max_attempts=retry_max_attempts,
        job_timeout_seconds=job_timeout_seconds,
        result_ttl_seconds=result_ttl_seconds,
    )


def _lazy_import_rq():
    """Importa rq solo cuando se construye el adapter."""
    try:
        import rq  # type: ignore
    except ImportError as exc:
        raise QueueConfigurationError(
            "RQ no está disponible. Instalar dependencia 'rq' para usar colas."
        ) from exc
    return rq
