"""
===============================================================================
USE CASE: Revoke Employee Permissions
===============================================================================

Elimina el grant de un empleado. Sin grant previo => NOT_FOUND.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import EmployeePermissionRepository
from .permission_results import (
    PermissionErrorCode,
    PermissionUseCaseError,
    RevokePermissionsResult,
)


class RevokePermissionsUseCase:
    def __init__(self, permission_repository: EmployeePermissionRepository) -> None:
        self._grants = permission_repository

    def execute(self, employee_id: UUID) -> RevokePermissionsResult:
        if not self._grants.delete_by_employee(employee_id):
            return RevokePermissionsResult(
                error=PermissionUseCaseError(
                    code=PermissionErrorCode.NOT_FOUND,
                    message="Permission record not found",
                )
            )

        logger.info("Permisos revocados", extra={"employee_id": str(employee_id)})
        return RevokePermissionsResult(revoked=True)
