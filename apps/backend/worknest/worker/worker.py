"""
===============================================================================
TARJETA CRC — worker/worker.py (Proceso Worker de mantenimiento)
===============================================================================

Responsabilidades:
  - Consumir la cola de mantenimiento (reset de recurrentes + limpieza).
  - Preparar el proceso antes del primer job: Redis alcanzable y pool de BD.
  - Publicar /healthz, /readyz y /metrics para el orquestador.
  - Modo --burst: vaciar la cola y salir (contenedores disparados por cron).

Colaboradores:
  - crosscutting.config.get_settings (redis_url, cola, puerto HTTP)
  - infrastructure.db.pool.init_pool / close_pool
  - rq.Worker
  - worker_server.start_worker_http_server

Notas:
  - Sin Redis o sin BD el proceso termina con SystemExit: nunca queda
    "vivo" sin poder ejecutar jobs.
===============================================================================
"""

from __future__ import annotations

import argparse

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Worker

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..infrastructure.db.pool import close_pool, init_pool
from .worker_server import start_worker_http_server


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Worker RQ de mantenimiento")
    parser.add_argument(
        "--burst",
        action="store_true",
        help="Procesa los jobs pendientes y termina.",
    )
    parser.add_argument(
        "--queue",
        default=None,
        help="Cola a consumir (default: MAINTENANCE_QUEUE_NAME).",
    )
    return parser.parse_args(argv)


def _connect_redis(redis_url: str) -> Redis:
    conn = Redis.from_url(
        redis_url,
        socket_connect_timeout=2,
        socket_timeout=5,
        health_check_interval=30,
    )
    try:
        conn.ping()
    except RedisError as exc:
        logger.error("Redis no disponible para el worker", extra={"error": str(exc)})
        raise SystemExit("Redis no disponible.") from exc
    return conn


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()

    redis_url = settings.redis_url.strip()
    if not redis_url:
        raise SystemExit("REDIS_URL es requerido para ejecutar el worker.")

    queue_name = (args.queue or settings.maintenance_queue_name).strip() or "maintenance"
    redis_conn = _connect_redis(redis_url)

    init_pool(
        database_url=settings.database_url,
        min_size=1,
        max_size=settings.db_pool_max_size,
    )

    # R: En burst el contenedor vive segundos; no publica HTTP.
    server = None
    if not args.burst and settings.worker_http_port > 0:
        server = start_worker_http_server(settings.worker_http_port)

    logger.info(
        "Worker de mantenimiento arrancando",
        extra={
            "queue": queue_name,
            "burst": args.burst,
            "http_port": settings.worker_http_port if server else None,
            "app_timezone": settings.app_timezone,
        },
    )

    try:
        worker = Worker(
            [Queue(name=queue_name, connection=redis_conn)],
            connection=redis_conn,
            name=f"worknest-{queue_name}",
        )
        worker.work(burst=args.burst, with_scheduler=False)
    except KeyboardInterrupt:
        logger.info("Worker detenido por señal")
    finally:
        if server is not None:
            server.shutdown()
            server.server_close()
        close_pool()
        logger.info("Worker apagado")


if __name__ == "__main__":
    main()
