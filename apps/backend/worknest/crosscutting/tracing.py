# apps/backend/worknest/crosscutting/tracing.py
"""
===============================================================================
MÓDULO: Tracing OpenTelemetry (opcional) + correlación con logs
===============================================================================

Objetivo
--------
- Activar spans alrededor de corridas batch cuando OTEL está habilitado
- Setear trace_id/span_id en contextvars para logs

Diseño
------
- Las libs de OTel son opcionales: si no están, span() es no-op.
- No-op cuando OTEL_ENABLED es false.
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Optional

from ..context import set_trace_context
from .config import get_settings
from .logger import logger

_tracer: Optional[Any] = None


def _init_tracing() -> None:
    global _tracer

    if not get_settings().otel_enabled:
        _tracer = None
        return

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
        )
    except ImportError:
        logger.warning("OTEL_ENABLED=true pero opentelemetry no está instalado")
        _tracer = None
        return

    provider = TracerProvider(resource=Resource.create({"service.name": "worknest"}))
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("worknest")


_init_tracing()


@contextmanager
def span(name: str, attributes: Optional[dict] = None) -> Generator[Any, None, None]:
    """
    Uso:
      with span("maintenance.reset_recurring_tasks", {"scope": "all"}):
          ...

    Si tracing no está habilitado, es no-op.
    """
    if _tracer is None:
        yield None
        return

    with _tracer.start_as_current_span(name) as s:
        for k, v in (attributes or {}).items():
            s.set_attribute(k, v)

        ctx = s.get_span_context()
        set_trace_context(
            trace_id=format(ctx.trace_id, "032x"),
            span_id=format(ctx.span_id, "016x"),
        )
        yield s


def is_tracing_enabled() -> bool:
    return _tracer is not None
