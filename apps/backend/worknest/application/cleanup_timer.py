"""
===============================================================================
TARJETA CRC — application/cleanup_timer.py
===============================================================================

Clase:
    CleanupTimer

Responsabilidades:
    - Ejecutar la limpieza de retención al iniciar el proceso y luego cada
      `interval_seconds` (respaldo del cron externo).
    - start() idempotente: compare-and-set bajo lock; una sola thread por
      instancia aunque haya llamadas concurrentes.
    - stop() señaliza y espera a la thread (shutdown ordenado del lifespan).
    - Una corrida fallida se loguea y el loop sigue.

Colaboradores:
    - container.get_cleanup_timer (dueño: lifespan de FastAPI)
    - RunRetentionCleanupUseCase (a través de `run_cleanup`)
    - context.bind_job_context / clear_context
    - crosscutting.metrics.record_job_run
===============================================================================
"""

from __future__ import annotations

import threading
import time
import uuid
from typing import Any, Callable

from ..context import bind_job_context, clear_context
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_job_run

JOB_NAME = "retention_cleanup_timer"


class CleanupTimer:
    def __init__(
        self,
        run_cleanup: Callable[[], Any],
        interval_seconds: float,
        *,
        name: str = "worknest-cleanup-timer",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._run_cleanup = run_cleanup
        self._interval = interval_seconds
        self._name = name
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> bool:
        """Arranca la thread. False si ya estaba arrancada (no-op)."""
        with self._lock:
            if self._thread is not None:
                return False
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._loop, name=self._name, daemon=True
            )
            self._thread.start()

        logger.info(
            "Timer de limpieza iniciado",
            extra={"interval_seconds": self._interval},
        )
        return True

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()

        if thread is not None:
            thread.join(timeout)
            logger.info("Timer de limpieza detenido")

    def run_once(self) -> None:
        """Una corrida con contexto, métricas y logs; nunca propaga."""
        bind_job_context(run_id=str(uuid.uuid4()), job_name=JOB_NAME, trigger="TIMER")
        start = time.perf_counter()
        status = "success"
        try:
            result = self._run_cleanup()
            if getattr(result, "ok", True) is False:
                status = "partial"
        except Exception:
            status = "failed"
            logger.exception("Corrida del timer de limpieza falló")
        finally:
            record_job_run(JOB_NAME, status, time.perf_counter() - start)
            clear_context()

    def _loop(self) -> None:
        # Primera corrida inmediata; luego espera interruptible.
        while not self._stop_event.is_set():
            self.run_once()
            if self._stop_event.wait(self._interval):
                break
