"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for local development

Collaborators:
  - api/main.py: reads settings for CORS, pool and cleanup timer
  - container.py: reads settings for repositories, clock and queue
  - identity/session.py: reads JWT and cookie settings
  - identity/cron_auth.py: reads the shared cron secret

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic: pure configuration
  - Retention windows are code constants, not settings

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        app_timezone: IANA timezone that defines "today" for batch jobs
        allowed_origins: Comma-separated CORS origins
        jwt_secret: Secret for signing session tokens
        jwt_session_ttl_minutes: Session token TTL in minutes (default: 30 days)
        jwt_cookie_name: Cookie name for the session token
        jwt_cookie_secure: Set Secure on session cookies
        cron_secret: Shared secret for cron endpoints (empty = always reject)
        cleanup_timer_enabled: Run the in-process cleanup timer
        cleanup_interval_seconds: Interval between timer runs (default: 24h)
        maintenance_max_seconds: Time budget of a batch run
        redis_url: Redis connection string for the maintenance queue (optional)
        maintenance_queue_name: RQ queue name for maintenance jobs
        worker_http_port: Port of the worker health/metrics server (0 disables it)
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"
    app_timezone: str = "UTC"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Observability
    log_level: str = "INFO"
    log_json: bool = True
    otel_enabled: bool = False
    metrics_require_auth: bool = False

    # Security - Session tokens (JWT)
    jwt_secret: str = "dev-secret"
    jwt_session_ttl_minutes: int = 30 * 24 * 60
    jwt_cookie_name: str = "session_token"
    jwt_cookie_secure: bool = False

    # Security - Cron endpoints
    cron_secret: str = ""

    # Maintenance (scheduler + cleanup)
    cleanup_timer_enabled: bool = True
    cleanup_interval_seconds: int = 24 * 60 * 60
    maintenance_max_seconds: float = 240.0

    # Redis / RQ
    redis_url: str = ""
    maintenance_queue_name: str = "maintenance"
    retry_max_attempts: int = 3
    worker_http_port: int = 8001  # 0 = sin server HTTP

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    @field_validator("app_timezone")
    @classmethod
    def app_timezone_must_exist(cls, v: str) -> str:
        name = (v or "UTC").strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"app_timezone '{name}' is not a valid IANA timezone") from exc
        return name

    @field_validator("cleanup_interval_seconds")
    @classmethod
    def cleanup_interval_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cleanup_interval_seconds must be greater than 0")
        return v

    @field_validator("maintenance_max_seconds")
    @classmethod
    def maintenance_budget_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("maintenance_max_seconds must be greater than 0")
        return v

    @field_validator("jwt_session_ttl_minutes")
    @classmethod
    def session_ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jwt_session_ttl_minutes must be greater than 0")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.app_timezone)

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.jwt_cookie_secure:
            raise ValueError("JWT_COOKIE_SECURE must be true in production")
        if not (self.cron_secret or "").strip():
            raise ValueError("CRON_SECRET is required in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
