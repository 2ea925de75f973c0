"""
===============================================================================
TARJETA CRC — worker/worker_health.py (Health & Readiness del Worker)
===============================================================================

Responsabilidades:
  - Readiness: Postgres y Redis alcanzables, más la profundidad de la cola
    de mantenimiento (jobs esperando).
  - Liveness: uptime del proceso.
  - CLI para HEALTHCHECK de contenedor (exit 0 listo / 1 no listo).

Colaboradores:
  - crosscutting.config.get_settings
  - psycopg (conexión directa: el CLI corre fuera del proceso del worker)
  - redis.Redis + rq.Queue

Notas:
  - Nunca lanza: cada dependencia caída se reporta como "disconnected".
  - Timeouts de 2s para que el probe responda rápido.
===============================================================================
"""

from __future__ import annotations

import json
import time
from typing import Any

import psycopg
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger

_STARTED_AT = time.monotonic()


def _check_db(database_url: str) -> bool:
    if not database_url:
        return False
    try:
        with psycopg.connect(database_url, connect_timeout=2) as conn:
            conn.execute("SELECT 1")
    except psycopg.Error as exc:
        logger.warning("Worker sin acceso a la BD", extra={"error": str(exc)})
        return False
    return True


def _queued_jobs(redis_url: str, queue_name: str) -> int | None:
    """Jobs esperando en la cola; None si Redis no responde."""
    if not redis_url:
        return None
    try:
        conn = Redis.from_url(redis_url, socket_connect_timeout=2, socket_timeout=2)
        conn.ping()
        return Queue(name=queue_name, connection=conn).count
    except RedisError as exc:
        logger.warning("Worker sin acceso a Redis", extra={"error": str(exc)})
        return None


def readiness_payload() -> dict[str, Any]:
    settings = get_settings()
    db_ok = _check_db(settings.database_url)
    queued = _queued_jobs(settings.redis_url.strip(), settings.maintenance_queue_name)
    redis_ok = queued is not None

    return {
        "ok": db_ok and redis_ok,
        "db": "connected" if db_ok else "disconnected",
        "redis": "connected" if redis_ok else "disconnected",
        "queue": settings.maintenance_queue_name,
        "queued_jobs": queued,
    }


def health_payload() -> dict[str, Any]:
    return {"ok": True, "uptime_seconds": int(time.monotonic() - _STARTED_AT)}


def main() -> None:
    payload = readiness_payload()
    print(json.dumps(payload))
    raise SystemExit(0 if payload["ok"] else 1)


if __name__ == "__main__":
    main()
