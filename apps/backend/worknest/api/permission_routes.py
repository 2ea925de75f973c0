"""
===============================================================================
TARJETA CRC — worknest/api/permission_routes.py (Permisos de empleados)
===============================================================================

Responsabilidades:
  - GET /api/employee/permissions: set efectivo del usuario de la sesión.
  - CRUD admin de grants: listar / otorgar (upsert) / revocar.
  - Mapear errores tipados de los casos de uso a HTTP.

Patrones aplicados:
  - Thin Controller: la regla (admin bypass, otorgante best-effort) vive en
    application/usecases/permissions.

Colaboradores:
  - container: factories de casos de uso
  - identity.session: read_session, require_admin

Notas:
  - El endpoint del empleado responde JSON plano ({error, details}) en vez de
    RFC7807: el frontend lee esos campos tal cual.
===============================================================================
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..application.usecases.permissions import (
    EmployeePermissionsView,
    PermissionErrorCode,
    PermissionUseCaseError,
)
from ..container import (
    get_grant_permissions_use_case,
    get_list_employee_permissions_use_case,
    get_resolve_permissions_use_case,
    get_revoke_permissions_use_case,
    get_user_repository,
)
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    bad_request,
    forbidden,
    internal_error,
    not_found,
)
from ..crosscutting.logger import logger
from ..identity.permissions import permission_names
from ..identity.session import SessionToken, read_session, require_admin
from .serializers import grantor_json, iso

router = APIRouter(tags=["permissions"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# DTOs
# -----------------------------------------------------------------------------


class GrantPermissionsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee_id: str = Field(..., alias="employeeId", min_length=1)
    permissions: list[str] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _parse_uuid(value: str | None, field: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise bad_request(f"Invalid {field}", errors=[{"field": field}]) from exc


def _raise_for(error: PermissionUseCaseError, *, resource: str, identifier: str):
    if error.code is PermissionErrorCode.VALIDATION_ERROR:
        raise bad_request(error.message)
    if error.code is PermissionErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code is PermissionErrorCode.NOT_FOUND:
        raise not_found(resource, identifier)
    raise internal_error(error.message)


def _employee_json(view: EmployeePermissionsView) -> dict[str, Any]:
    return {
        "_id": str(view.employee.id),
        "name": view.employee.name,
        "email": view.employee.email,
        "permissions": permission_names(view.permissions),
        "grantedBy": grantor_json(view.granted_by),
        "grantedAt": iso(view.granted_at),
    }


# -----------------------------------------------------------------------------
# Empleado: set efectivo propio
# -----------------------------------------------------------------------------


@router.get("/api/employee/permissions")
def get_my_permissions(request: Request):
    session = read_session(request)
    if session is None:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        user_id = UUID(session.user_id)
    except ValueError:
        return JSONResponse({"error": "Invalid user id"}, status_code=400)

    try:
        result = get_resolve_permissions_use_case().execute(user_id)
    except Exception as exc:
        logger.exception("Error resolviendo permisos", extra={"user_id": str(user_id)})
        return JSONResponse(
            {"error": "Internal Server Error", "details": str(exc)}, status_code=500
        )

    if result.error is not None:
        return JSONResponse({"error": result.error.message}, status_code=404)

    effective = result.permissions
    return {
        "permissions": permission_names(effective.permissions),
        "isAdmin": effective.is_admin,
        "grantedBy": grantor_json(effective.granted_by),
        "grantedAt": iso(effective.granted_at),
    }


# -----------------------------------------------------------------------------
# Admin: gestión de grants
# -----------------------------------------------------------------------------


@router.get("/api/admin/permissions")
def list_employee_permissions(_admin: SessionToken = Depends(require_admin())):
    result = get_list_employee_permissions_use_case().execute()
    return {"employees": [_employee_json(v) for v in result.employees]}


@router.post("/api/admin/permissions")
def grant_permissions(
    req: GrantPermissionsRequest,
    admin: SessionToken = Depends(require_admin()),
):
    employee_id = _parse_uuid(req.employee_id, "employeeId")
    actor_id = _parse_uuid(admin.user_id, "session user id")

    result = get_grant_permissions_use_case().execute(
        actor_id=actor_id,
        actor_is_admin=admin.is_admin,
        employee_id=employee_id,
        permissions=req.permissions,
    )
    if result.error is not None:
        _raise_for(result.error, resource="Employee", identifier=str(employee_id))

    grant = result.grant
    users = get_user_repository()
    employee = users.get_user_by_id(employee_id)
    granted_by = users.get_user_by_id(actor_id)
    return {
        "success": True,
        "permission": {
            "employeeId": {
                "_id": str(employee_id),
                "name": (employee.name if employee else None) or "Unknown",
                "email": (employee.email if employee else None) or "",
            },
            "permissions": list(grant.permissions),
            "grantedBy": {
                "_id": str(actor_id),
                "name": (granted_by.name if granted_by else None) or "Unknown",
                "email": (granted_by.email if granted_by else None) or "",
            },
            "grantedAt": iso(grant.granted_at),
            "createdAt": iso(grant.created_at),
            "updatedAt": iso(grant.updated_at),
        },
    }


@router.delete("/api/admin/permissions")
def revoke_permissions(
    employeeId: str | None = None,
    _admin: SessionToken = Depends(require_admin()),
):
    if not employeeId:
        raise bad_request("Employee ID required")
    employee_id = _parse_uuid(employeeId, "employeeId")

    result = get_revoke_permissions_use_case().execute(employee_id)
    if result.error is not None:
        _raise_for(result.error, resource="Permission record", identifier=employeeId)

    return {"success": True, "message": "Permissions removed successfully"}
