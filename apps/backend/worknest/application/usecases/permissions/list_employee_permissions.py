"""
===============================================================================
USE CASE: List Employee Permissions
===============================================================================

Lista empleados aprobados con su set de permisos y procedencia.
Empleados sin grant aparecen con set vacío.
===============================================================================
"""

from __future__ import annotations

from typing import Dict, Optional
from uuid import UUID

from ....domain.repositories import EmployeePermissionRepository, UserRepository
from .permission_results import (
    EmployeePermissionsListResult,
    EmployeePermissionsView,
    GrantorInfo,
)
from .resolve_permissions import stored_permissions, project_grantor


class ListEmployeePermissionsUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        permission_repository: EmployeePermissionRepository,
    ) -> None:
        self._users = user_repository
        self._grants = permission_repository

    def execute(self) -> EmployeePermissionsListResult:
        grants = {g.employee_id: g for g in self._grants.list_all()}
        grantors: Dict[UUID, Optional[GrantorInfo]] = {}

        views = []
        for employee in self._users.list_approved_employees():
            grant = grants.get(employee.id)
            if grant is None:
                views.append(EmployeePermissionsView(employee=employee, permissions=[]))
                continue

            # R: un mismo admin suele otorgar muchos grants; se resuelve una vez.
            if grant.granted_by is not None and grant.granted_by not in grantors:
                grantors[grant.granted_by] = project_grantor(
                    self._users, grant.granted_by
                )

            views.append(
                EmployeePermissionsView(
                    employee=employee,
                    permissions=stored_permissions(grant.permissions),
                    granted_by=grantors.get(grant.granted_by)
                    if grant.granted_by
                    else None,
                    granted_at=grant.granted_at,
                )
            )

        return EmployeePermissionsListResult(employees=views)
