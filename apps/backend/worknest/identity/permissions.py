"""
===============================================================================
TARJETA CRC — identity/permissions.py
===============================================================================

Módulo:
    Catálogo de Permisos Granulares (empleados)

Responsabilidades:
    - Definir el catálogo cerrado de capacidades (Permission).
    - Describir cada permiso y agruparlos por categoría (para UI / listados).
    - Validar nombres de permisos recibidos por API (parse_permissions).
    - Evaluar un set efectivo: has_permission / has_any / has_all.

Colaboradores:
    - application/usecases/permissions: resuelven y otorgan permisos.
    - identity/session.py: require_admin_or_permission().
    - domain.entities.EmployeePermission: persiste nombres de este catálogo.

Notas:
    - El orden del enum es el orden "de catálogo" que devuelven las APIs.
    - MANAGE_PERMISSIONS es el único permiso que solo un admin puede otorgar.
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping


class Permission(str, Enum):
    # Employee Management
    MANAGE_EMPLOYEES = "manage_employees"
    APPROVE_EMPLOYEES = "approve_employees"
    VIEW_EMPLOYEES = "view_employees"

    # Project Management
    MANAGE_PROJECTS = "manage_projects"
    ASSIGN_PROJECTS = "assign_projects"
    VIEW_PROJECTS = "view_projects"

    # Daily Updates
    REVIEW_DAILY_UPDATES = "review_daily_updates"
    MANAGE_CHECKLISTS = "manage_checklists"

    # Tasks
    ASSIGN_TASKS = "assign_tasks"
    MANAGE_TASKS = "manage_tasks"

    # Attendance
    VIEW_ATTENDANCE = "view_attendance"
    MANAGE_ATTENDANCE = "manage_attendance"

    # Leaderboard & Bonuses
    MANAGE_LEADERBOARD = "manage_leaderboard"
    MANAGE_BONUSES = "manage_bonuses"

    # Hackathons
    MANAGE_HACKATHONS = "manage_hackathons"

    # Messages
    VIEW_MESSAGES = "view_messages"
    MANAGE_MESSAGES = "manage_messages"

    # System
    MANAGE_PERMISSIONS = "manage_permissions"


PERMISSION_DESCRIPTIONS: Mapping[Permission, str] = {
    Permission.MANAGE_EMPLOYEES: "Add, edit, and remove employees",
    Permission.APPROVE_EMPLOYEES: "Approve or reject employee registrations",
    Permission.VIEW_EMPLOYEES: "View employee profiles and information",
    Permission.MANAGE_PROJECTS: "Create, edit, and delete projects",
    Permission.ASSIGN_PROJECTS: "Assign projects to employees",
    Permission.VIEW_PROJECTS: "View all projects",
    Permission.REVIEW_DAILY_UPDATES: "Review and approve daily updates",
    Permission.MANAGE_CHECKLISTS: "Manage daily update checklists",
    Permission.ASSIGN_TASKS: "Assign tasks to employees",
    Permission.MANAGE_TASKS: "Create, edit, and delete tasks",
    Permission.VIEW_ATTENDANCE: "View employee attendance records",
    Permission.MANAGE_ATTENDANCE: "Mark and modify attendance",
    Permission.MANAGE_LEADERBOARD: "Manage leaderboard and rankings",
    Permission.MANAGE_BONUSES: "Assign bonuses and fines",
    Permission.MANAGE_HACKATHONS: "Manage hackathons and events",
    Permission.VIEW_MESSAGES: "View messages and communications",
    Permission.MANAGE_MESSAGES: "Send and manage messages",
    Permission.MANAGE_PERMISSIONS: "Manage employee permissions (Admin only)",
}

PERMISSION_CATEGORIES: Mapping[str, tuple[Permission, ...]] = {
    "Employee Management": (
        Permission.MANAGE_EMPLOYEES,
        Permission.APPROVE_EMPLOYEES,
        Permission.VIEW_EMPLOYEES,
    ),
    "Project Management": (
        Permission.MANAGE_PROJECTS,
        Permission.ASSIGN_PROJECTS,
        Permission.VIEW_PROJECTS,
    ),
    "Daily Updates": (
        Permission.REVIEW_DAILY_UPDATES,
        Permission.MANAGE_CHECKLISTS,
    ),
    "Tasks": (Permission.ASSIGN_TASKS, Permission.MANAGE_TASKS),
    "Attendance": (Permission.VIEW_ATTENDANCE, Permission.MANAGE_ATTENDANCE),
    "Leaderboard & Bonuses": (
        Permission.MANAGE_LEADERBOARD,
        Permission.MANAGE_BONUSES,
    ),
    "Hackathons": (Permission.MANAGE_HACKATHONS,),
    "Messages": (Permission.VIEW_MESSAGES, Permission.MANAGE_MESSAGES),
    "System": (Permission.MANAGE_PERMISSIONS,),
}

ADMIN_ONLY_GRANTS: frozenset[Permission] = frozenset({Permission.MANAGE_PERMISSIONS})


class UnknownPermissionError(ValueError):
    """Uno o más nombres no pertenecen al catálogo."""

    def __init__(self, invalid: list[str]):
        self.invalid = invalid
        super().__init__(f"Invalid permissions: {', '.join(invalid)}")


def all_permissions() -> list[Permission]:
    """Catálogo completo, en orden de catálogo."""
    return list(Permission)


def sort_permissions(values: Iterable[Permission]) -> list[Permission]:
    """Ordena un set de permisos según el catálogo (salida estable para APIs)."""
    wanted = set(values)
    return [p for p in Permission if p in wanted]


def parse_permissions(values: Iterable[str]) -> list[Permission]:
    """
    Convierte nombres a Permission (deduplicados, en orden de catálogo).

    Raises:
        UnknownPermissionError: si algún nombre no existe en el catálogo.
    """
    parsed: set[Permission] = set()
    invalid: list[str] = []
    for raw in values:
        try:
            parsed.add(Permission(str(raw).strip()))
        except ValueError:
            invalid.append(str(raw))
    if invalid:
        raise UnknownPermissionError(invalid)
    return sort_permissions(parsed)


def permission_names(values: Iterable[str]) -> list[str]:
    """Nombres planos para serializar (Permission o nombre persistido)."""
    return [v.value if isinstance(v, Permission) else v for v in values]


def has_permission(effective: Iterable[Permission], permission: Permission) -> bool:
    return permission in set(effective)


def has_any_permission(
    effective: Iterable[Permission], permissions: Iterable[Permission]
) -> bool:
    held = set(effective)
    return any(p in held for p in permissions)


def has_all_permissions(
    effective: Iterable[Permission], permissions: Iterable[Permission]
) -> bool:
    held = set(effective)
    return all(p in held for p in permissions)
