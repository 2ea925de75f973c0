"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios por email / id (login, permisos, otorgantes).
  - Listar empleados aprobados (pantalla de permisos del admin).
  - Crear usuarios (script create_admin).
  - Mapear filas -> `User` validando `UserRole` estrictamente.

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - identity.users.User / UserRole

Constraints / Notes:
  - Retorna None cuando no existe el recurso (no exception por "not found").
  - Rol persistido fuera del enum => DatabaseError (drift de datos).
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import User, UserRole
from .base import PostgresRepositoryBase

# R: Lista explícita de columnas para mantener el contrato estable con migraciones.
_USER_COLUMNS = (
    "id, email, name, password_hash, role, is_approved, profile_completed, created_at"
)


def _row_to_user(row: tuple) -> User:
    role = UserRole.parse(row[4])
    if role is None:
        raise DatabaseError(f"Invalid user role in database: {row[4]}")

    return User(
        id=row[0],
        email=row[1],
        name=row[2],
        password_hash=row[3],
        role=role,
        is_approved=bool(row[5]),
        profile_completed=bool(row[6]),
        created_at=row[7],
    )


class PostgresUserRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del repositorio de usuarios."""

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            context_msg="PostgresUserRepository: get_user_by_email failed",
            extra={},
        )
        return _row_to_user(row) if row else None

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def list_approved_employees(self) -> list[User]:
        rows = self._fetchall(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE role = %s AND is_approved = TRUE
                ORDER BY name ASC NULLS LAST, email ASC
            """,
            params=(UserRole.EMPLOYEE.value,),
            context_msg="PostgresUserRepository: list_approved_employees failed",
            extra={},
        )
        return [_row_to_user(r) for r in rows]

    def create_user(self, user: User) -> User:
        row = self._fetchone(
            query=f"""
                INSERT INTO users (
                    id, email, name, password_hash, role,
                    is_approved, profile_completed, created_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, COALESCE(%s, NOW()))
                RETURNING {_USER_COLUMNS}
            """,
            params=(
                user.id,
                user.email,
                user.name,
                user.password_hash,
                user.role.value,
                user.is_approved,
                user.profile_completed,
                user.created_at,
            ),
            context_msg="PostgresUserRepository: create_user failed",
            extra={"role": user.role.value},
        )
        if not row:
            raise DatabaseError("Failed to create user: no row returned")
        return _row_to_user(row)
