"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) — Observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus (si la dependencia existe) sin romper el runtime.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO user_id, NO task_id, NO paths crudos).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: latencia/conteo HTTP y redirects del access gate.
    - worker/jobs + application.cleanup_timer: corridas batch.
    - application/usecases: tareas reseteadas y registros borrados.

Decisiones de diseño:
    - Dependencia opcional: si `prometheus_client` no está instalado, no-op.
    - Registro propio (CollectorRegistry) para no mezclar con el default.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Optional

_prometheus_available = False
_registry = None

try:
    from prometheus_client import (  # type: ignore
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )

    _prometheus_available = True
    _registry = CollectorRegistry()
except ImportError:
    pass


_requests_total: Optional["Counter"] = None
_request_latency: Optional["Histogram"] = None

_access_redirects_total: Optional["Counter"] = None

_job_runs_total: Optional["Counter"] = None
_job_duration: Optional["Histogram"] = None

_tasks_reset_total: Optional["Counter"] = None
_records_deleted_total: Optional["Counter"] = None


def _init_metrics() -> None:
    """Inicializa métricas (una sola vez)."""
    global _requests_total, _request_latency, _access_redirects_total
    global _job_runs_total, _job_duration
    global _tasks_reset_total, _records_deleted_total

    if not _prometheus_available or _requests_total is not None:
        return

    # HTTP
    _requests_total = Counter(
        "worknest_requests_total",
        "Total de requests HTTP",
        ["endpoint", "method", "status"],
        registry=_registry,
    )
    _request_latency = Histogram(
        "worknest_request_latency_seconds",
        "Latencia de requests HTTP (segundos)",
        ["endpoint", "method"],
        buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        registry=_registry,
    )

    # Access gate
    _access_redirects_total = Counter(
        "worknest_access_redirects_total",
        "Redirects emitidos por el access gate",
        ["reason"],
        registry=_registry,
    )

    # Jobs batch (scheduler + cleanup)
    _job_runs_total = Counter(
        "worknest_job_runs_total",
        "Corridas de jobs batch por resultado",
        ["job", "status"],
        registry=_registry,
    )
    _job_duration = Histogram(
        "worknest_job_duration_seconds",
        "Duración de jobs batch (segundos)",
        ["job"],
        buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
        registry=_registry,
    )

    # Resultados de negocio
    _tasks_reset_total = Counter(
        "worknest_tasks_reset_total",
        "Tareas recurrentes reseteadas",
        registry=_registry,
    )
    _records_deleted_total = Counter(
        "worknest_records_deleted_total",
        "Registros borrados por la limpieza de retención",
        ["kind"],
        registry=_registry,
    )


_init_metrics()


# -----------------------------------------------------------------------------
# API pública
# -----------------------------------------------------------------------------


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP (endpoint normalizado, status agrupado)."""
    if not _prometheus_available:
        return

    normalized = _normalize_endpoint(endpoint)
    if _requests_total:
        _requests_total.labels(
            endpoint=normalized,
            method=method,
            status=_status_bucket(status_code),
        ).inc()
    if _request_latency:
        _request_latency.labels(endpoint=normalized, method=method).observe(
            latency_seconds
        )


def record_access_redirect(reason: str) -> None:
    """reason: login_required | role_dashboard."""
    if _access_redirects_total:
        _access_redirects_total.labels(reason=reason).inc()


def record_job_run(job: str, status: str, duration_seconds: float) -> None:
    """Cuenta una corrida batch y observa su duración."""
    if _job_runs_total:
        _job_runs_total.labels(job=job, status=status).inc()
    if _job_duration:
        _job_duration.labels(job=job).observe(duration_seconds)


def record_tasks_reset(count: int) -> None:
    if _tasks_reset_total and count > 0:
        _tasks_reset_total.inc(count)


def record_records_deleted(kind: str, count: int) -> None:
    if _records_deleted_total and count > 0:
        _records_deleted_total.labels(kind=kind).inc(count)


# -----------------------------------------------------------------------------
# Helpers internos
# -----------------------------------------------------------------------------

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def _normalize_endpoint(path: str) -> str:
    """Reemplaza UUIDs e IDs numéricos por `{id}` para evitar cardinalidad alta."""
    path = _UUID_RE.sub("{id}", path)
    return re.sub(r"/\d+", "/{id}", path)


def _status_bucket(code: int) -> str:
    """Agrupa status code: 2xx/3xx/4xx/5xx."""
    if 200 <= code < 600:
        return f"{code // 100}xx"
    return "other"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    if not _prometheus_available:
        return b"# prometheus_client no instalado\n", "text/plain"
    return generate_latest(_registry), CONTENT_TYPE_LATEST


def is_prometheus_available() -> bool:
    return _prometheus_available
