# apps/backend/worknest/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request / job
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON, una línea por evento)
- Correlacionable (request_id / user_id / trace_id)
- Segura (redacción de secretos: tokens de sesión, CRON_SECRET, passwords)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON con el nombre del servicio
  - Enriquecer con contexto (request_id, path, method, user_id, trace_id)
  - Redactar campos sensibles y limitar tamaños

Colaboradores:
  - worknest/context.py (ContextVars)
  - crosscutting/config.py (log_level, log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

SERVICE_NAME = "worknest-api"

# Campos internos del LogRecord que NO se copian como "extra".
_INTERNAL_LOGRECORD_KEYS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


class _Redactor:
    """
    Redacta claves sensibles y recorta valores gigantes antes de serializar.

    Las claves se comparan en minúsculas. Un valor bajo clave sensible nunca
    se loguea, ni siquiera parcialmente.
    """

    SENSITIVE_KEYS = frozenset(
        {
            "password",
            "password_hash",
            "secret",
            "token",
            "session_token",
            "access_token",
            "authorization",
            "cookie",
            "jwt_secret",
            "cron_secret",
            "credential",
        }
    )

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTADO***"

        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncado)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """
    Convierte LogRecord -> JSON.

    - Agrega contexto de request/job (worknest.context)
    - Adjunta stacktrace cuando hay excepción
    """

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self._service = service
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def _resolve_level_and_format() -> tuple[str, bool]:
    """Lee log_level / log_json de Settings; si la config aún no es válida usa defaults."""
    from pydantic import ValidationError

    from .config import get_settings

    try:
        s = get_settings()
    except ValidationError:
        return "INFO", True
    return (s.log_level or "INFO").upper(), bool(s.log_json)


def setup_logger(name: str = SERVICE_NAME) -> logging.Logger:
    """
    Crea y configura el logger global.

    - Evita duplicación de handlers en reimport
    - Respeta log_level / log_json desde Settings cuando estén disponibles
    """
    log = logging.getLogger(name)
    level, use_json = _resolve_level_and_format()
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
