"""
PostgreSQL Repository Implementations.

Raw parameterized SQL over psycopg 3 + psycopg_pool.
"""

from .employee_permission import PostgresEmployeePermissionRepository
from .retention import PostgresRetentionRepository
from .task import PostgresTaskHistoryRepository, PostgresTaskRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresEmployeePermissionRepository",
    "PostgresTaskRepository",
    "PostgresTaskHistoryRepository",
    "PostgresRetentionRepository",
]
