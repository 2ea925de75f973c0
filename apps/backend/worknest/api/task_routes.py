"""
===============================================================================
TARJETA CRC — worknest/api/task_routes.py (Reset de recurrentes on-demand)
===============================================================================

Responsabilidades:
  - POST /api/tasks/reset-recurring?scope=user|all
      - user (default): tareas recurrentes asignadas al usuario de la sesión.
      - all: requiere admin o el permiso manage_tasks.

Colaboradores:
  - container.get_reset_recurring_tasks_use_case
  - identity.session: require_session, has_admin_or_permission
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..application.usecases.tasks import (
    ResetRecurringTasksError,
    ResetScope,
    ResetScopeKind,
)
from ..container import get_reset_recurring_tasks_use_case
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    bad_request,
    forbidden,
)
from ..crosscutting.logger import logger
from ..identity.permissions import Permission
from ..identity.session import (
    SessionToken,
    has_admin_or_permission,
    require_session,
    session_user_id,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"], responses=OPENAPI_ERROR_RESPONSES)


@router.post("/reset-recurring")
def reset_recurring(
    scope: str = "user",
    session: SessionToken = Depends(require_session()),
):
    scope_kind = (scope or "user").strip().lower()
    if scope_kind == ResetScopeKind.ALL.value:
        if not has_admin_or_permission(session, Permission.MANAGE_TASKS):
            raise forbidden(
                "Only admins can reset all recurring tasks",
                errors=[{"required": Permission.MANAGE_TASKS.value}],
            )
        reset_scope = ResetScope.all()
    elif scope_kind == ResetScopeKind.USER.value:
        reset_scope = ResetScope.user(session_user_id(session))
    else:
        raise bad_request("scope must be 'user' or 'all'")

    try:
        result = get_reset_recurring_tasks_use_case().execute(reset_scope)
    except ResetRecurringTasksError as exc:
        logger.error(
            "Reset on-demand falló",
            extra={"scope": scope_kind, "reset_count": exc.reset_count},
        )
        return JSONResponse(
            {
                "error": "Failed to reset recurring tasks",
                "details": exc.message,
                "resetCount": exc.reset_count,
            },
            status_code=500,
        )

    return {
        "success": True,
        "resetCount": result.reset_count,
        "scope": scope_kind,
        "message": f"Successfully reset {result.reset_count} recurring task(s)",
    }
