"""
===============================================================================
TARJETA CRC — identity/session.py
===============================================================================

Módulo:
    Sesiones de Usuario (JWT)

Responsabilidades:
    - Hashear/verificar passwords (Argon2).
    - Emitir el token de sesión con expiración (claims de rol y onboarding).
    - Decodificar y validar el token (firma, exp, claims mínimos, typ).
    - Extraer el token desde Authorization: Bearer o cookie.
    - Exponer dependencias FastAPI (require_session, require_admin,
      require_admin_or_permission).

Colaboradores:
    - crosscutting.config.get_settings: secretos, TTL, cookie settings.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - identity.users: User / UserRole.
    - identity.permissions: Permission (chequeo granular).
    - container: repositorio de usuarios y resolver de permisos (lazy).

Decisiones de diseño:
    - El token es inmutable durante su vida: no se refresca contra la DB.
    - read_session() es fail-closed: cualquier error de verificación => None.
    - No loguear secretos ni tokens; solo info mínima y segura.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Request

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import AppHTTPException, forbidden, unauthorized
from ..crosscutting.logger import logger
from .permissions import Permission
from .users import User, UserRole

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

DEFAULT_SESSION_COOKIE: str = "session_token"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_APPROVED: str = "is_approved"
CLAIM_PROFILE_COMPLETED: str = "profile_completed"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_SESSION: str = "session"

_password_hasher = PasswordHasher()


@dataclass(frozen=True, slots=True)
class SessionToken:
    """
    Claims verificados de una sesión.

    role se conserva como string: un rol desconocido no invalida la sesión
    (el access gate lo deja pasar sin redirigir).
    """

    user_id: str
    email: str
    role: str
    is_approved: bool
    profile_completed: bool

    @property
    def user_role(self) -> UserRole | None:
        return UserRole.parse(self.role)

    @property
    def is_admin(self) -> bool:
        return self.user_role is UserRole.ADMIN


# ---------------------------------------------------------------------------
# Passwords (Argon2)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def authenticate_user(email: str, password: str) -> User | None:
    """
    Valida credenciales y retorna el usuario o None.

    No diferenciamos "usuario no existe" vs "password incorrecto".
    """
    normalized_email = (email or "").strip().lower()
    if not normalized_email:
        return None

    from ..container import get_user_repository

    user = get_user_repository().get_user_by_email(normalized_email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rechazado")
        return None
    return user


# ---------------------------------------------------------------------------
# Tokens JWT (emitir / decodificar)
# ---------------------------------------------------------------------------


def create_session_token(
    user: User, *, now: datetime | None = None
) -> tuple[str, int]:
    """
    Crea el token de sesión firmado.

    Retorna:
        (token, expires_in_seconds)
    """
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_in = int(settings.jwt_session_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: str(user.id),
        CLAIM_EMAIL: user.email,
        CLAIM_ROLE: user.role.value,
        CLAIM_APPROVED: bool(user.is_approved),
        CLAIM_PROFILE_COMPLETED: bool(user.profile_completed),
        CLAIM_IAT: int(issued_at.timestamp()),
        CLAIM_EXP: int((issued_at + timedelta(seconds=expires_in)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_SESSION,
    }

    token = jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_session_token(token: str) -> SessionToken:
    """
    Decodifica y valida un token de sesión.

    Errores:
        - 401 si expiró, firma inválida, faltan claims o typ incorrecto.
    """
    try:
        payload = jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_ROLE, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Sesión expirada.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Sesión inválida.") from exc

    if payload.get(CLAIM_TYP) != TOKEN_TYPE_SESSION:
        raise unauthorized("Tipo de token inválido.")

    user_id = payload.get(CLAIM_SUB)
    role = payload.get(CLAIM_ROLE)
    if not user_id or not isinstance(role, str):
        raise unauthorized("Sesión inválida.")

    return SessionToken(
        user_id=str(user_id),
        email=str(payload.get(CLAIM_EMAIL) or ""),
        role=role,
        is_approved=bool(payload.get(CLAIM_APPROVED, False)),
        profile_completed=bool(payload.get(CLAIM_PROFILE_COMPLETED, False)),
    )


# ---------------------------------------------------------------------------
# Extracción de token (header/cookie)
# ---------------------------------------------------------------------------


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def session_cookie_name() -> str:
    return (get_settings().jwt_cookie_name or "").strip() or DEFAULT_SESSION_COOKIE


def extract_session_token(request: Request) -> str | None:
    token = extract_bearer_token(request.headers.get("authorization"))
    if token:
        return token
    return request.cookies.get(session_cookie_name())


def read_session(request: Request) -> SessionToken | None:
    """Sesión verificada o None (fail-closed: token inválido == sin token)."""
    token = extract_session_token(request)
    if not token:
        return None
    try:
        return decode_session_token(token)
    except AppHTTPException:
        return None


def session_user_id(session: SessionToken) -> UUID:
    """UUID del sujeto de la sesión; 401 si el claim no es un UUID."""
    try:
        return UUID(session.user_id)
    except ValueError as exc:
        raise unauthorized("Sesión inválida.") from exc


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_session() -> Callable:
    """Dependency FastAPI: requiere sesión válida."""

    async def dependency(request: Request) -> SessionToken:
        token = extract_session_token(request)
        if not token:
            raise unauthorized("Falta token de sesión.")
        session = decode_session_token(token)
        request.state.session = session
        return session

    return dependency


def require_admin() -> Callable:
    """Dependency FastAPI: requiere sesión de un admin."""

    async def dependency(request: Request) -> SessionToken:
        session = await require_session()(request)
        if not session.is_admin:
            raise forbidden("Se requiere rol admin.")
        return session

    return dependency


def has_admin_or_permission(session: SessionToken, permission: Permission) -> bool:
    """Admin, o empleado cuyo set efectivo incluye `permission`."""
    if session.is_admin:
        return True

    from ..container import get_resolve_permissions_use_case

    result = get_resolve_permissions_use_case().execute(session_user_id(session))
    return result.error is None and permission in result.permissions.permissions


def require_admin_or_permission(permission: Permission) -> Callable:
    """Dependency FastAPI: 403 salvo admin o permiso granular."""

    async def dependency(request: Request) -> SessionToken:
        session = await require_session()(request)
        if has_admin_or_permission(session, permission):
            return session

        logger.warning(
            "Permiso insuficiente",
            extra={"required": permission.value, "user_id": session.user_id},
        )
        raise forbidden(
            "Insufficient permissions", errors=[{"required": permission.value}]
        )

    return dependency
