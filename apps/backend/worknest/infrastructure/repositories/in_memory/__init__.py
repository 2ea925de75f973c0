"""
In-memory repository implementations (tests / local dev).

Thread-safe, same contracts as the PostgreSQL repositories; nothing survives
a process restart.
"""

from .employee_permission import InMemoryEmployeePermissionRepository
from .retention import InMemoryRetentionRepository
from .task import InMemoryTaskHistoryRepository, InMemoryTaskRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryUserRepository",
    "InMemoryEmployeePermissionRepository",
    "InMemoryTaskRepository",
    "InMemoryTaskHistoryRepository",
    "InMemoryRetentionRepository",
]
