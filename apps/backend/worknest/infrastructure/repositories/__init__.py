"""
============================================================
TARJETA CRC
============================================================
Class: worknest.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo)
- Repositorios InMemory (testing / fallback)
============================================================
"""

# ---------------------------
# In-memory implementations
# ---------------------------
from .in_memory import (
    InMemoryEmployeePermissionRepository,
    InMemoryRetentionRepository,
    InMemoryTaskHistoryRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
)

# ---------------------------
# Postgres implementations
# ---------------------------
from .postgres import (
    PostgresEmployeePermissionRepository,
    PostgresRetentionRepository,
    PostgresTaskHistoryRepository,
    PostgresTaskRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresUserRepository",
    "PostgresEmployeePermissionRepository",
    "PostgresTaskRepository",
    "PostgresTaskHistoryRepository",
    "PostgresRetentionRepository",
    # In-memory
    "InMemoryUserRepository",
    "InMemoryEmployeePermissionRepository",
    "InMemoryTaskRepository",
    "InMemoryTaskHistoryRepository",
    "InMemoryRetentionRepository",
]
