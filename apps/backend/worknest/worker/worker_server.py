"""
===============================================================================
TARJETA CRC — worker/worker_server.py (HTTP operativo del Worker)
===============================================================================

Responsabilidades:
  - Servir /healthz, /readyz y /metrics desde el proceso worker, que no
    carga FastAPI.
  - Aplicar a /metrics la misma regla que la API: con METRICS_REQUIRE_AUTH
    se exige un bearer de sesión admin.

Colaboradores:
  - worker_health.health_payload / readiness_payload
  - crosscutting.metrics.get_metrics_response
  - identity.session.decode_session_token
===============================================================================
"""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import urlparse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import AppHTTPException
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..identity.session import decode_session_token, extract_bearer_token
from .worker_health import health_payload, readiness_payload

_PROBE_PATHS = frozenset({"/healthz", "/readyz"})


def metrics_access_status(authorization: str | None) -> int:
    """200 si puede leer métricas; 401 sin sesión válida; 403 si no es admin."""
    if not get_settings().metrics_require_auth:
        return 200

    token = extract_bearer_token(authorization)
    if not token:
        return 401
    try:
        session = decode_session_token(token)
    except AppHTTPException:
        return 401
    return 200 if session.is_admin else 403


class _MaintenanceWorkerHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        route: Callable[[], None] | None = self._routes().get(
            urlparse(self.path).path
        )
        if route is None:
            self._send(404, b"", "text/plain")
            return
        route()

    def _routes(self) -> dict[str, Callable[[], None]]:
        return {
            "/healthz": self._healthz,
            "/readyz": self._readyz,
            "/metrics": self._metrics,
        }

    def _healthz(self) -> None:
        self._send_json(200, health_payload())

    def _readyz(self) -> None:
        payload = readiness_payload()
        self._send_json(200 if payload["ok"] else 503, payload)

    def _metrics(self) -> None:
        status = metrics_access_status(self.headers.get("Authorization"))
        if status != 200:
            self._send_json(status, {"detail": "Se requiere rol admin."})
            return
        body, content_type = get_metrics_response()
        self._send(200, body, content_type)

    def _send_json(self, status: int, payload: dict[str, Any]) -> None:
        self._send(status, json.dumps(payload).encode("utf-8"), "application/json")

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        # R: Los probes del orquestador llegan cada pocos segundos.
        path = urlparse(getattr(self, "path", "") or "").path
        log = logger.debug if path in _PROBE_PATHS else logger.info
        log("Worker HTTP", extra={"path": path, "detail": format % args})


def start_worker_http_server(port: int) -> ThreadingHTTPServer | None:
    """Arranca el server en un thread daemon; None si el puerto está ocupado."""
    try:
        server = ThreadingHTTPServer(("0.0.0.0", port), _MaintenanceWorkerHandler)
    except OSError as exc:
        logger.warning(
            "No se pudo iniciar el HTTP del worker",
            extra={"port": port, "error": str(exc)},
        )
        return None

    threading.Thread(
        target=server.serve_forever, name="worker-http", daemon=True
    ).start()
    logger.info("HTTP del worker escuchando", extra={"port": port})
    return server


__all__ = ["metrics_access_status", "start_worker_http_server"]
