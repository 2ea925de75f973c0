"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (request context, access gate, CORS)
  - Mount auth, permission, task and cron routers
  - Own the process-lifetime resources: DB pool and cleanup timer
  - Expose health, readiness and metrics endpoints

Collaborators:
  - crosscutting.middleware: RequestContextMiddleware, AccessGateMiddleware
  - container.get_cleanup_timer: in-process retention cleanup fallback
  - infrastructure.db.pool: init_pool / check_connection / close_pool

Constraints:
  - In test env (APP_ENV=test) the pool is not opened: repositories are
    in-memory and /readyz skips the DB ping
  - The cleanup timer is started once per process (idempotent start) and
    can be disabled with CLEANUP_TIMER_ENABLED=false

Notes:
  - Middleware order matters: RequestContext → AccessGate → CORS → routes
  - /healthz is liveness only; /readyz checks the DB
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_cleanup_timer, is_test_env
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import AccessGateMiddleware, RequestContextMiddleware
from ..identity.session import read_session
from ..infrastructure.db.pool import (
    DatabasePoolError,
    check_connection,
    close_pool,
    init_pool,
)
from .auth_routes import router as auth_router
from .cron_routes import router as cron_router
from .exception_handlers import register_exception_handlers
from .permission_routes import router as permission_router
from .task_routes import router as task_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Settings validate on first access."""
    settings = get_settings()
    use_db = not is_test_env()

    if use_db:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    timer = get_cleanup_timer() if settings.cleanup_timer_enabled else None
    try:
        if timer is not None:
            timer.start()

        logger.info(
            "WorkNest API starting up",
            extra={
                "app_env": settings.app_env,
                "app_timezone": settings.app_timezone,
                "cleanup_timer_enabled": settings.cleanup_timer_enabled,
                "cleanup_interval_seconds": settings.cleanup_interval_seconds,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        if timer is not None:
            timer.stop()
        if use_db:
            close_pool()
        logger.info("WorkNest API shutting down")


# R: Get settings for CORS configuration (safe at module level after env is loaded)
def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        return ["http://localhost:3000"]


app = FastAPI(
    title="WorkNest API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Session login/logout (JWT)"},
        {"name": "permissions", "description": "Employee permission grants"},
        {"name": "tasks", "description": "Recurring task maintenance"},
        {"name": "cron", "description": "External scheduler triggers"},
    ],
)

# R: Middleware order (last added = first to execute):
# 1. RequestContextMiddleware - sets request_id (covers redirects too)
# 2. AccessGateMiddleware - role routing before any handler
# 3. CORSMiddleware - handles preflight
try:
    _cors_allow_credentials = get_settings().cors_allow_credentials
except Exception:
    _cors_allow_credentials = False
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=_cors_allow_credentials,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
)
app.add_middleware(AccessGateMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(auth_router)
app.include_router(permission_router)
app.include_router(task_router)
app.include_router(cron_router)

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """Liveness: the process answers."""
    return {"ok": True, "request_id": getattr(request.state, "request_id", None)}


@app.get("/readyz")
def readyz(request: Request, response: Response):
    """
    Readiness for core dependencies (DB).

    Returns:
        ok: True if core dependencies are operational
        db: "connected", "disconnected" or "skipped" (test env)
    """
    if is_test_env():
        db_status = "skipped"
    else:
        db_status = "disconnected"
        try:
            check_connection()
            db_status = "connected"
        except DatabasePoolError as e:
            logger.warning("Ready check: DB unavailable", extra={"error": str(e)})

    ok = db_status != "disconnected"
    if not ok:
        response.status_code = 503
    return {
        "ok": ok,
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics(request: Request):
    """Prometheus text format metrics (admin session if METRICS_REQUIRE_AUTH)."""
    if get_settings().metrics_require_auth:
        session = read_session(request)
        if session is None:
            raise unauthorized()
        if not session.is_admin:
            raise forbidden("Se requiere rol admin.")

    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
