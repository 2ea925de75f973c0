"""
===============================================================================
MÓDULO: Middlewares HTTP (contexto + access gate)
===============================================================================

Objetivo
--------
1) RequestContextMiddleware:
   - Generar/propagar request_id
   - Setear contextvars (method/path)
   - Log y métricas por request

2) AccessGateMiddleware:
   - Aplicar la política de identity/access_gate.py a cada request
   - Redirigir con 307 (login requerido / dashboard del rol)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - RequestContextMiddleware
  - AccessGateMiddleware

Responsabilidades:
  - Observabilidad (request_id + logs + métricas)
  - Enrutamiento por rol antes de llegar a los handlers

Colaboradores:
  - worknest/context.py
  - crosscutting/metrics.py
  - identity/access_gate.py, identity/session.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from ..context import (
    clear_context,
    http_method_var,
    http_path_var,
    request_id_var,
    set_user_context,
)
from .logger import logger
from .metrics import record_access_redirect, record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RequestContextMiddleware

    Responsabilidades:
      - Generar/aceptar X-Request-Id y devolverlo en la respuesta
      - Setear contextvars para correlación de logs
      - Emitir logs y métricas por request
      - Garantizar clear_context() para evitar leaks

    Colaboradores:
      - crosscutting.metrics.record_request_metrics
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = {"/healthz", "/readyz", "/metrics"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get("x-request-id") or "").strip()
        request_id = (
            incoming if self._is_valid_request_id(incoming) else str(uuid.uuid4())
        )

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)

        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            latency = time.perf_counter() - start
            logger.exception(
                "request falló",
                extra={"status_code": 500, "latency_ms": round(latency * 1000, 2)},
            )
            raise
        finally:
            latency = time.perf_counter() - start

            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )

            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )

            clear_context()

    @staticmethod
    def _is_valid_request_id(value: str) -> bool:
        return bool(value) and len(value) <= 128


class AccessGateMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AccessGateMiddleware

    Responsabilidades:
      - Leer la sesión en modo fail-closed (token inválido == sin sesión)
      - Delegar la decisión a decide_access() y responder 307 si redirige
      - Exponer la sesión en request.state para los handlers

    Colaboradores:
      - identity.access_gate.decide_access
      - identity.session.read_session
      - crosscutting.metrics.record_access_redirect
    ----------------------------------------------------------------------------
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        from ..identity.access_gate import decide_access, is_bypassed
        from ..identity.session import read_session

        path = request.url.path
        if is_bypassed(path):
            return await call_next(request)

        session = read_session(request)
        if session is not None:
            set_user_context(session.user_id)

        decision = decide_access(path, session)
        if decision.allow:
            return await call_next(request)

        reason = decision.reason.value if decision.reason else "unknown"
        record_access_redirect(reason)
        logger.info(
            "access gate redirige",
            extra={"location": decision.location, "reason": reason},
        )
        return RedirectResponse(url=decision.location or "/", status_code=307)
