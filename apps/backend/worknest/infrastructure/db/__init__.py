"""Infra DB: pool de conexiones + errores tipados."""

from .pool import (
    DatabaseConnectionError,
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
    check_connection,
    close_pool,
    get_pool,
    init_pool,
)

__all__ = [
    "init_pool",
    "get_pool",
    "close_pool",
    "check_connection",
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "DatabaseConnectionError",
]
