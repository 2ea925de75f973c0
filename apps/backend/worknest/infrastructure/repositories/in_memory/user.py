"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Replicar el contrato de PostgresUserRepository (None si no existe,
    orden por nombre en el listado de empleados).

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from ....identity.users import User, UserRole


class InMemoryUserRepository:
    def __init__(self, users: Iterable[User] = ()) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {u.id: u for u in users}

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def list_approved_employees(self) -> List[User]:
        with self._lock:
            employees = [
                u
                for u in self._users.values()
                if u.role is UserRole.EMPLOYEE and u.is_approved
            ]
        return sorted(employees, key=lambda u: ((u.name or "~"), u.email))

    def create_user(self, user: User) -> User:
        with self._lock:
            if any(u.email == user.email for u in self._users.values()):
                raise ValueError(f"User with email {user.email} already exists")
            self._users[user.id] = user
        return user

    def delete_user(self, user_id: UUID) -> None:
        """R: Solo tests (simula un otorgante borrado)."""
        with self._lock:
            self._users.pop(user_id, None)
