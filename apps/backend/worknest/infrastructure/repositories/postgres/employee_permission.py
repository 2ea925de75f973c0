"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/employee_permission.py
============================================================
Class: PostgresEmployeePermissionRepository

Responsibilities:
  - Persistir el grant de permisos de cada empleado (uno por employee_id).
  - Upsert atómico (ON CONFLICT) que conserva created_at.
  - Borrado por empleado (revocación).

Collaborators:
  - PostgresRepositoryBase
  - domain.entities.EmployeePermission
  - Tabla: employee_permissions (permissions TEXT[])

Constraints / Notes:
  - Sin validación de catálogo aquí: eso vive en identity.permissions.
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import EmployeePermission
from .base import PostgresRepositoryBase

_COLUMNS = "employee_id, permissions, granted_by, granted_at, created_at, updated_at"


def _row_to_grant(row: tuple) -> EmployeePermission:
    return EmployeePermission(
        employee_id=row[0],
        permissions=tuple(row[1] or ()),
        granted_by=row[2],
        granted_at=row[3],
        created_at=row[4],
        updated_at=row[5],
    )


class PostgresEmployeePermissionRepository(PostgresRepositoryBase):
    def get_by_employee(self, employee_id: UUID) -> Optional[EmployeePermission]:
        row = self._fetchone(
            query=f"SELECT {_COLUMNS} FROM employee_permissions WHERE employee_id = %s",
            params=(employee_id,),
            context_msg="PostgresEmployeePermissionRepository: get failed",
            extra={"employee_id": str(employee_id)},
        )
        return _row_to_grant(row) if row else None

    def list_all(self) -> list[EmployeePermission]:
        rows = self._fetchall(
            query=f"""
                SELECT {_COLUMNS}
                FROM employee_permissions
                ORDER BY granted_at DESC NULLS LAST, employee_id ASC
            """,
            params=(),
            context_msg="PostgresEmployeePermissionRepository: list failed",
            extra={},
        )
        return [_row_to_grant(r) for r in rows]

    def upsert(self, grant: EmployeePermission) -> EmployeePermission:
        row = self._fetchone(
            query=f"""
                INSERT INTO employee_permissions (
                    employee_id, permissions, granted_by, granted_at,
                    created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, COALESCE(%s, NOW()), COALESCE(%s, NOW()))
                ON CONFLICT (employee_id) DO UPDATE SET
                    permissions = EXCLUDED.permissions,
                    granted_by = EXCLUDED.granted_by,
                    granted_at = EXCLUDED.granted_at,
                    updated_at = EXCLUDED.updated_at
                RETURNING {_COLUMNS}
            """,
            params=(
                grant.employee_id,
                list(grant.permissions),
                grant.granted_by,
                grant.granted_at,
                grant.created_at,
                grant.updated_at,
            ),
            context_msg="PostgresEmployeePermissionRepository: upsert failed",
            extra={"employee_id": str(grant.employee_id)},
        )
        if not row:
            raise DatabaseError("Failed to upsert permissions: no row returned")
        return _row_to_grant(row)

    def delete_by_employee(self, employee_id: UUID) -> bool:
        deleted = self._execute(
            query="DELETE FROM employee_permissions WHERE employee_id = %s",
            params=(employee_id,),
            context_msg="PostgresEmployeePermissionRepository: delete failed",
            extra={"employee_id": str(employee_id)},
        )
        return deleted > 0
