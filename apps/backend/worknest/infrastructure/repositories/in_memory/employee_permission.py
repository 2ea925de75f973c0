"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/employee_permission.py
============================================================
Class: InMemoryEmployeePermissionRepository

Responsibilities:
  - Un grant por employee_id (dict), upsert que conserva created_at.

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Entidades frozen: se guardan tal cual, sin copias.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import EmployeePermission


class InMemoryEmployeePermissionRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._grants: Dict[UUID, EmployeePermission] = {}

    def get_by_employee(self, employee_id: UUID) -> Optional[EmployeePermission]:
        with self._lock:
            return self._grants.get(employee_id)

    def list_all(self) -> List[EmployeePermission]:
        with self._lock:
            return list(self._grants.values())

    def upsert(self, grant: EmployeePermission) -> EmployeePermission:
        with self._lock:
            existing = self._grants.get(grant.employee_id)
            if existing is not None and existing.created_at is not None:
                grant = replace(grant, created_at=existing.created_at)
            self._grants[grant.employee_id] = grant
            return grant

    def delete_by_employee(self, employee_id: UUID) -> bool:
        with self._lock:
            return self._grants.pop(employee_id, None) is not None
