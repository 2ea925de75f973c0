"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (singleton por proceso)

Responsabilidades:
  - Inicializar, exponer y cerrar el pool (psycopg_pool).
  - Aplicar statement_timeout a cada conexión nueva.
  - Ping de readiness (check_connection) para /readyz del API y del worker.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - crosscutting.config.get_settings (timeout)
  - api/main.py lifespan, worker/worker.py

Principios:
  - Fail-fast: doble init o uso sin init son errores tipados.
===============================================================================
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from ...crosscutting.logger import logger

if TYPE_CHECKING:
    from psycopg_pool import ConnectionPool


class DatabasePoolError(Exception):
    """Base de errores del ciclo de vida del pool."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado dos veces en el mismo proceso."""


class PoolNotInitializedError(DatabasePoolError):
    """get_pool() antes de init_pool()."""


class DatabaseConnectionError(DatabasePoolError):
    """No se pudo adquirir una conexión o el ping falló."""


_pool: Optional["ConnectionPool"] = None
_pool_lock = threading.Lock()


def _configure_connection(conn) -> None:
    from ...crosscutting.config import get_settings

    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
        conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> "ConnectionPool":
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        # Lazy import: tests unitarios importan el paquete sin psycopg_pool abierto.
        from psycopg_pool import ConnectionPool

        logger.info(
            "Inicializando pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )
        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=True,
        )
        return _pool


def get_pool() -> "ConnectionPool":
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def check_connection() -> None:
    """SELECT 1 contra el pool. Raises DatabaseConnectionError."""
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1").fetchone()
    except DatabasePoolError:
        raise
    except Exception as exc:
        raise DatabaseConnectionError(f"Ping a la DB falló: {exc}") from exc


def close_pool() -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is None:
            return
        logger.info("Cerrando pool DB")
        try:
            _pool.close()
        finally:
            _pool = None
