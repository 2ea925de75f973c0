"""
Use Cases Layer (Business Operations)

This package exposes entry points for business logic, organized by feature.

Structure
---------
usecases/
├── permissions/    # Effective permission resolution and admin grants
├── tasks/          # Recurring task scheduler
└── maintenance/    # Retention cleanup

Usage
-----
    from worknest.application.usecases.tasks import ResetRecurringTasksUseCase

Or use the barrel exports from this module:

    from worknest.application.usecases import ResetRecurringTasksUseCase
"""

# Maintenance
from .maintenance import CleanupResult, RunRetentionCleanupUseCase

# Permissions
from .permissions import (
    EffectivePermissions,
    GrantPermissionsUseCase,
    ListEmployeePermissionsUseCase,
    PermissionErrorCode,
    ResolvePermissionsUseCase,
    RevokePermissionsUseCase,
)

# Tasks
from .tasks import (
    ResetRecurringTasksError,
    ResetRecurringTasksResult,
    ResetRecurringTasksUseCase,
    ResetScope,
)

__all__ = [
    # Permissions
    "ResolvePermissionsUseCase",
    "GrantPermissionsUseCase",
    "RevokePermissionsUseCase",
    "ListEmployeePermissionsUseCase",
    "EffectivePermissions",
    "PermissionErrorCode",
    # Tasks
    "ResetRecurringTasksUseCase",
    "ResetRecurringTasksResult",
    "ResetRecurringTasksError",
    "ResetScope",
    # Maintenance
    "RunRetentionCleanupUseCase",
    "CleanupResult",
]
