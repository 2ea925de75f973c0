"""
===============================================================================
USE CASE: Grant Employee Permissions
===============================================================================

Reemplaza el set de permisos de un empleado (upsert: un grant por empleado).

Reglas:
  - Todos los nombres deben pertenecer al catálogo (VALIDATION_ERROR).
  - El destino debe ser un usuario existente con rol employee (NOT_FOUND).
  - Permisos de ADMIN_ONLY_GRANTS solo los otorga un admin (FORBIDDEN).
  - granted_by = actor, granted_at = ahora; created_at se conserva.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import EmployeePermission, utcnow
from ....domain.repositories import EmployeePermissionRepository, UserRepository
from ....identity.permissions import (
    ADMIN_ONLY_GRANTS,
    UnknownPermissionError,
    parse_permissions,
)
from ....identity.users import UserRole
from .permission_results import (
    GrantPermissionsResult,
    PermissionErrorCode,
    PermissionUseCaseError,
)


class GrantPermissionsUseCase:
    """Otorga (reemplaza) el set de permisos de un empleado."""

    def __init__(
        self,
        user_repository: UserRepository,
        permission_repository: EmployeePermissionRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = user_repository
        self._grants = permission_repository
        self._clock = clock

    def execute(
        self,
        *,
        actor_id: UUID,
        actor_is_admin: bool,
        employee_id: UUID,
        permissions: Iterable[str],
    ) -> GrantPermissionsResult:
        # 1. Validar nombres contra el catálogo
        try:
            parsed = parse_permissions(permissions)
        except UnknownPermissionError as exc:
            return GrantPermissionsResult(
                error=PermissionUseCaseError(
                    code=PermissionErrorCode.VALIDATION_ERROR,
                    message=str(exc),
                )
            )

        # 2. Autoridad sobre permisos reservados
        if not actor_is_admin and ADMIN_ONLY_GRANTS.intersection(parsed):
            return GrantPermissionsResult(
                error=PermissionUseCaseError(
                    code=PermissionErrorCode.FORBIDDEN,
                    message="Only admins can grant manage_permissions",
                )
            )

        # 3. El destino tiene que ser un empleado
        employee = self._users.get_user_by_id(employee_id)
        if employee is None or employee.role is not UserRole.EMPLOYEE:
            return GrantPermissionsResult(
                error=PermissionUseCaseError(
                    code=PermissionErrorCode.NOT_FOUND,
                    message="Employee not found",
                )
            )

        # 4. Upsert
        now = self._clock()
        existing = self._grants.get_by_employee(employee_id)
        grant = self._grants.upsert(
            EmployeePermission(
                employee_id=employee_id,
                permissions=tuple(p.value for p in parsed),
                granted_by=actor_id,
                granted_at=now,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
        )

        logger.info(
            "Permisos actualizados",
            extra={
                "employee_id": str(employee_id),
                "granted_by": str(actor_id),
                "count": len(parsed),
            },
        )
        return GrantPermissionsResult(grant=grant)
