"""
===============================================================================
USE CASE: Resolve Effective Permissions
===============================================================================

Calcula el set efectivo de permisos de un usuario y su procedencia.

Reglas:
  - Usuario inexistente => NOT_FOUND.
  - Admin => catálogo completo, is_admin=True, sin procedencia
    (los grants granulares de un admin se ignoran).
  - No admin sin grant => set vacío, sin procedencia.
  - No admin con grant => set persistido tal cual (nombres fuera del
    catálogo incluidos, con warning) + otorgante (best-effort):
      * otorgante inexistente o lookup con error => granted_by None
      * otorgante sin nombre/email => "Unknown" / ""
===============================================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import EmployeePermissionRepository, UserRepository
from ....identity.permissions import Permission, all_permissions, sort_permissions
from ...enrichment import enrich
from .permission_results import (
    EffectivePermissions,
    GrantorInfo,
    PermissionErrorCode,
    PermissionUseCaseError,
    ResolvePermissionsResult,
)


def stored_permissions(names: tuple[str, ...] | list[str]) -> list[str]:
    """
    Nombres persistidos tal cual: los del catálogo como Permission (en orden de
    catálogo) y luego los desconocidos, en el orden guardado.
    """
    known: set[Permission] = set()
    unknown: list[str] = []
    for name in names:
        try:
            known.add(Permission(name))
        except ValueError:
            if name not in unknown:
                logger.warning(
                    "Permiso persistido fuera del catálogo", extra={"permission": name}
                )
                unknown.append(name)
    return [*sort_permissions(known), *unknown]


def project_grantor(
    users: UserRepository, grantor_id: Optional[UUID]
) -> GrantorInfo | None:
    """Proyección del otorgante; cualquier fallo degrada a None."""
    if grantor_id is None:
        return None

    grantor = enrich("granted_by", users.get_user_by_id, grantor_id).or_none()
    if grantor is None:
        return None
    return GrantorInfo(
        id=grantor.id,
        name=grantor.name or "Unknown",
        email=grantor.email or "",
    )


class ResolvePermissionsUseCase:
    """Resuelve el set efectivo de permisos de un usuario."""

    def __init__(
        self,
        user_repository: UserRepository,
        permission_repository: EmployeePermissionRepository,
    ) -> None:
        self._users = user_repository
        self._grants = permission_repository

    def execute(self, user_id: UUID) -> ResolvePermissionsResult:
        user = self._users.get_user_by_id(user_id)
        if user is None:
            return ResolvePermissionsResult(
                error=PermissionUseCaseError(
                    code=PermissionErrorCode.NOT_FOUND,
                    message="User not found",
                )
            )

        if user.is_admin:
            return ResolvePermissionsResult(
                permissions=EffectivePermissions(
                    permissions=all_permissions(), is_admin=True
                )
            )

        grant = self._grants.get_by_employee(user.id)
        if grant is None:
            return ResolvePermissionsResult(
                permissions=EffectivePermissions(permissions=[], is_admin=False)
            )

        return ResolvePermissionsResult(
            permissions=EffectivePermissions(
                permissions=stored_permissions(grant.permissions),
                is_admin=False,
                granted_by=project_grantor(self._users, grant.granted_by),
                granted_at=grant.granted_at,
            )
        )
