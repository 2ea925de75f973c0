"""
===============================================================================
TARJETA CRC — worknest/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, cola, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends), el worker y los scripts.
  - Mantener singletons con caching (lru_cache) para recursos compartidos.
  - Centralizar decisiones runtime basadas en Settings (timezone, budgets).

Colaboradores:
  - worknest.crosscutting.config.get_settings
  - worknest.domain.repositories (puertos)
  - worknest.infrastructure.* (implementaciones)
  - worknest.application.* (casos de uso, timer)

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (use cases dependen de puertos)
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - Tests: conftest limpia los caches entre tests (repos in-memory frescos).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.cleanup_timer import CleanupTimer
from .application.usecases import (
    GrantPermissionsUseCase,
    ListEmployeePermissionsUseCase,
    ResetRecurringTasksUseCase,
    ResolvePermissionsUseCase,
    RevokePermissionsUseCase,
    RunRetentionCleanupUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    EmployeePermissionRepository,
    RetentionRepository,
    TaskHistoryRepository,
    TaskRepository,
    UserRepository,
)
from .infrastructure.repositories import (
    InMemoryEmployeePermissionRepository,
    InMemoryRetentionRepository,
    InMemoryTaskHistoryRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    PostgresEmployeePermissionRepository,
    PostgresRetentionRepository,
    PostgresTaskHistoryRepository,
    PostgresTaskRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - app_env ∈ {"test", "testing", "ci"} => se favorecen in-memory adapters.
    """
    env = get_settings().app_env.strip().lower()
    return env in {"test", "testing", "ci"}


def is_test_env() -> bool:
    return _is_test_env()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_employee_permission_repository() -> EmployeePermissionRepository:
    if _is_test_env():
        return InMemoryEmployeePermissionRepository()
    return PostgresEmployeePermissionRepository()


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    if _is_test_env():
        return InMemoryTaskRepository()
    return PostgresTaskRepository()


@lru_cache(maxsize=1)
def get_task_history_repository() -> TaskHistoryRepository:
    if _is_test_env():
        return InMemoryTaskHistoryRepository()
    return PostgresTaskHistoryRepository()


@lru_cache(maxsize=1)
def get_retention_repository() -> RetentionRepository:
    if _is_test_env():
        return InMemoryRetentionRepository()
    return PostgresRetentionRepository()


# =============================================================================
# Cola de mantenimiento (opcional)
# =============================================================================


@lru_cache(maxsize=1)
def get_maintenance_queue():
    """
    Cola RQ de mantenimiento si REDIS_URL está configurada; None si no.

    Imports lazy: la API no necesita redis/rq para servir requests.
    """
    settings = get_settings()
    if not settings.redis_url.strip():
        return None

    from redis import Redis

    from .infrastructure.queue import RQMaintenanceQueue, RQQueueConfig

    redis_conn = Redis.from_url(
        settings.redis_url,
        socket_connect_timeout=2,
        socket_timeout=5,
        health_check_interval=30,
    )
    config = RQQueueConfig(
        queue_name=settings.maintenance_queue_name,
        retry_max_attempts=settings.retry_max_attempts,
    )
    return RQMaintenanceQueue(redis=redis_conn, config=config)


# =============================================================================
# Casos de uso (factory por llamada)
# =============================================================================


def get_resolve_permissions_use_case() -> ResolvePermissionsUseCase:
    return ResolvePermissionsUseCase(
        user_repository=get_user_repository(),
        permission_repository=get_employee_permission_repository(),
    )


def get_list_employee_permissions_use_case() -> ListEmployeePermissionsUseCase:
    return ListEmployeePermissionsUseCase(
        user_repository=get_user_repository(),
        permission_repository=get_employee_permission_repository(),
    )


def get_grant_permissions_use_case() -> GrantPermissionsUseCase:
    return GrantPermissionsUseCase(
        user_repository=get_user_repository(),
        permission_repository=get_employee_permission_repository(),
    )


def get_revoke_permissions_use_case() -> RevokePermissionsUseCase:
    return RevokePermissionsUseCase(
        permission_repository=get_employee_permission_repository(),
    )


def get_reset_recurring_tasks_use_case() -> ResetRecurringTasksUseCase:
    settings = get_settings()
    return ResetRecurringTasksUseCase(
        task_repository=get_task_repository(),
        history_repository=get_task_history_repository(),
        timezone=settings.get_timezone(),
        max_seconds=settings.maintenance_max_seconds,
    )


def get_run_retention_cleanup_use_case() -> RunRetentionCleanupUseCase:
    return RunRetentionCleanupUseCase(
        retention_repository=get_retention_repository(),
        timezone=get_settings().get_timezone(),
    )


# =============================================================================
# Timer de limpieza (singleton de proceso)
# =============================================================================


def _run_cleanup_once():
    return get_run_retention_cleanup_use_case().execute()


@lru_cache(maxsize=1)
def get_cleanup_timer() -> CleanupTimer:
    """Un único timer por proceso: start() es idempotente."""
    return CleanupTimer(
        run_cleanup=_run_cleanup_once,
        interval_seconds=get_settings().cleanup_interval_seconds,
    )


CACHED_FACTORIES = (
    get_user_repository,
    get_employee_permission_repository,
    get_task_repository,
    get_task_history_repository,
    get_retention_repository,
    get_maintenance_queue,
    get_cleanup_timer,
)


def reset_container() -> None:
    """Limpia todos los singletons (tests / recarga de settings)."""
    for factory in CACHED_FACTORIES:
        factory.cache_clear()
