"""
===============================================================================
TASK USE CASES PACKAGE (Public API / Exports)
===============================================================================
"""

from __future__ import annotations

from .reset_recurring_tasks import ResetRecurringTasksUseCase
from .task_results import (
    ResetRecurringTasksError,
    ResetRecurringTasksResult,
    ResetScope,
    ResetScopeKind,
)

__all__ = [
    "ResetRecurringTasksUseCase",
    "ResetRecurringTasksResult",
    "ResetRecurringTasksError",
    "ResetScope",
    "ResetScopeKind",
]
