"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Roles y Usuarios

Responsabilidades:
    - Definir el enum CERRADO de roles (admin, employee, client, hackathon).
    - Mapear cada rol a su dashboard con un match exhaustivo.
    - Definir el dataclass User utilizado por login, sesión y permisos.

Colaboradores:
    - identity/session.py: usa User y UserRole para emitir/validar tokens.
    - identity/access_gate.py: usa dashboard_path_for() para redirects.
    - infrastructure/repositories/*/user.py: mapean filas -> User.

Notas:
    - Si agregás un rol nuevo, dashboard_path_for() deja de tipar
      (assert_never) hasta que se agregue su rama.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import assert_never
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados por la plataforma."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    CLIENT = "client"
    HACKATHON = "hackathon"

    @classmethod
    def parse(cls, value: object) -> "UserRole | None":
        """Parsea un valor no confiable (claim de token, fila de DB). None si no es un rol conocido."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def dashboard_path_for(role: UserRole) -> str:
    """Dashboard fijo de cada rol."""
    match role:
        case UserRole.ADMIN:
            return "/admin/dashboard"
        case UserRole.EMPLOYEE:
            return "/employee/dashboard"
        case UserRole.CLIENT:
            return "/client/dashboard"
        case UserRole.HACKATHON:
            return "/hackathon/dashboard"
        case _:
            assert_never(role)


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario (identidad + estado de aprobación/onboarding)."""

    id: UUID
    email: str
    name: str | None
    password_hash: str | None
    role: UserRole
    is_approved: bool
    profile_completed: bool
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
