"""
===============================================================================
PERMISSION USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Permission Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para resolver,
    otorgar, revocar y listar permisos granulares de empleados.

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar
      excepciones hacia afuera; la API mapea códigos a status HTTP.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    permission_results models (module)

Responsibilities:
    - PermissionErrorCode: categorías estables de error.
    - PermissionUseCaseError: code + message.
    - GrantorInfo / EffectivePermissions: respuesta del resolver.
    - Resultados por comando (resolve, list, grant, revoke).

Collaborators:
    - identity.permissions.Permission
    - identity.users.User
    - domain.entities.EmployeePermission
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List
from uuid import UUID

from ....domain.entities import EmployeePermission
from ....identity.users import User


class PermissionErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: nombres de permiso inválidos o input incompleto.
      - FORBIDDEN: actor sin autoridad para otorgar lo pedido.
      - NOT_FOUND: usuario / empleado / grant inexistente.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class PermissionUseCaseError:
    code: PermissionErrorCode
    message: str


@dataclass(frozen=True)
class GrantorInfo:
    """Proyección liviana de quien otorgó un permiso."""

    id: UUID
    name: str
    email: str


@dataclass(frozen=True)
class EffectivePermissions:
    """
    Set efectivo de un usuario.

    Contrato:
      - is_admin => catálogo completo y sin procedencia.
      - granted_by None si no hay grant o si el otorgante no resuelve.
      - permissions: miembros de Permission y, tras ellos, nombres
        persistidos fuera del catálogo (str).
    """

    permissions: List[str]
    is_admin: bool
    granted_by: GrantorInfo | None = None
    granted_at: datetime | None = None


@dataclass
class ResolvePermissionsResult:
    permissions: EffectivePermissions | None = None
    error: PermissionUseCaseError | None = None


@dataclass(frozen=True)
class EmployeePermissionsView:
    """Empleado aprobado + su grant actual (para la pantalla de admin)."""

    employee: User
    permissions: List[str]
    granted_by: GrantorInfo | None = None
    granted_at: datetime | None = None


@dataclass
class EmployeePermissionsListResult:
    employees: List[EmployeePermissionsView] = field(default_factory=list)
    error: PermissionUseCaseError | None = None


@dataclass
class GrantPermissionsResult:
    grant: EmployeePermission | None = None
    error: PermissionUseCaseError | None = None


@dataclass
class RevokePermissionsResult:
    revoked: bool = False
    error: PermissionUseCaseError | None = None
