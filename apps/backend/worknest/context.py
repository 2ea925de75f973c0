"""
===============================================================================
TARJETA CRC — worknest/context.py (Contexto por request / job)
===============================================================================

Responsabilidades:
  - Mantener contexto "request-scoped" usando ContextVars (async-safe).
  - Correlacionar logs de requests HTTP y de corridas batch (scheduler/cleanup).
  - Proveer helpers mínimos: set_*(), bind_job_context(), get_context_dict(),
    clear_context().

Colaboradores:
  - worknest.crosscutting.middleware: setea request_id/method/path y user_id.
  - worknest.crosscutting.logger: enriquece logs leyendo get_context_dict().
  - worknest.crosscutting.tracing: setea trace_id/span_id si OTel está habilitado.
  - worknest.worker.jobs y application.cleanup_timer: contexto por corrida.

Restricciones:
  - Solo tipos primitivos (str) para serialización segura.
  - Defaults vacíos ("") para evitar None y simplificar JSON.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

# Identificador de request o corrida batch.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Identificadores de traza (hex) si está habilitado tracing (OpenTelemetry).
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")
span_id_var: ContextVar[str] = ContextVar("span_id", default="")

# Metadatos HTTP básicos para logs. En jobs: method=WORKER|TIMER, path=nombre del job.
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# Usuario de la sesión (si el request trae un token válido).
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_TRACE_ID: Final[str] = "trace_id"
_CTX_SPAN_ID: Final[str] = "span_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"
_CTX_USER_ID: Final[str] = "user_id"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Setea el contexto mínimo del request (strings vacíos = no disponible)."""
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def bind_job_context(*, run_id: str, job_name: str, trigger: str = "WORKER") -> None:
    """
    Setea el contexto de una corrida batch.

    trigger:
      - "WORKER": job RQ.
      - "TIMER": timer in-process de limpieza.
    """
    request_id_var.set(run_id or "")
    http_method_var.set(trigger or "")
    http_path_var.set(job_name or "")


def set_user_context(user_id: str = "") -> None:
    user_id_var.set(user_id or "")


def set_trace_context(*, trace_id: str = "", span_id: str = "") -> None:
    trace_id_var.set(trace_id or "")
    span_id_var.set(span_id or "")


def get_context_dict() -> dict[str, str]:
    """Devuelve el contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := trace_id_var.get():
        ctx[_CTX_TRACE_ID] = val
    if val := span_id_var.get():
        ctx[_CTX_SPAN_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val
    if val := user_id_var.get():
        ctx[_CTX_USER_ID] = val

    return ctx


def clear_context() -> None:
    """
    Limpia el contexto al final del request/job.

    Importante:
      - Evita "filtración de contexto" entre requests y entre corridas del timer.
    """
    request_id_var.set("")
    trace_id_var.set("")
    span_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    user_id_var.set("")
