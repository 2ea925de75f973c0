"""
===============================================================================
MAINTENANCE USE CASES PACKAGE (Public API / Exports)
===============================================================================
"""

from __future__ import annotations

from .run_retention_cleanup import (
    COMPLETED_TASK_RETENTION,
    DAILY_UPDATE_RETENTION,
    CleanupResult,
    RunRetentionCleanupUseCase,
)

__all__ = [
    "RunRetentionCleanupUseCase",
    "CleanupResult",
    "COMPLETED_TASK_RETENTION",
    "DAILY_UPDATE_RETENTION",
]
