"""
===============================================================================
PERMISSION USE CASES PACKAGE (Public API / Exports)
===============================================================================

Re-exporta los casos de uso de permisos granulares y sus resultados.
===============================================================================
"""

from __future__ import annotations

from .grant_permissions import GrantPermissionsUseCase
from .list_employee_permissions import ListEmployeePermissionsUseCase
from .permission_results import (
    EffectivePermissions,
    EmployeePermissionsListResult,
    EmployeePermissionsView,
    GrantorInfo,
    GrantPermissionsResult,
    PermissionErrorCode,
    PermissionUseCaseError,
    ResolvePermissionsResult,
    RevokePermissionsResult,
)
from .resolve_permissions import ResolvePermissionsUseCase
from .revoke_permissions import RevokePermissionsUseCase

__all__ = [
    # Use cases
    "ResolvePermissionsUseCase",
    "GrantPermissionsUseCase",
    "RevokePermissionsUseCase",
    "ListEmployeePermissionsUseCase",
    # Results
    "EffectivePermissions",
    "GrantorInfo",
    "EmployeePermissionsView",
    "EmployeePermissionsListResult",
    "GrantPermissionsResult",
    "RevokePermissionsResult",
    "ResolvePermissionsResult",
    "PermissionErrorCode",
    "PermissionUseCaseError",
]
