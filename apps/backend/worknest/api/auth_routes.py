"""
===============================================================================
TARJETA CRC — worknest/api/auth_routes.py (Login / Logout / Me)
===============================================================================

Responsabilidades:
  - Login por email + password: emite el token de sesión y setea la cookie
    httpOnly.
  - Logout idempotente (borra la cookie).
  - Me: devuelve los claims de la sesión actual.

Colaboradores:
  - identity.session: authenticate_user, create_session_token, require_session

Notas:
  - Vive bajo /api/auth: el access gate nunca intercepta estas rutas.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, unauthorized
from ..identity.session import (
    SessionToken,
    authenticate_user,
    create_session_token,
    require_session,
    session_cookie_name,
)
from ..identity.users import User, UserRole

router = APIRouter(prefix="/api/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(BaseModel):
    id: UUID
    email: str
    name: str | None
    role: UserRole
    is_approved: bool
    profile_completed: bool


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SessionResponse(BaseModel):
    user_id: str
    email: str
    role: str
    is_approved: bool
    profile_completed: bool


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        is_approved=user.is_approved,
        profile_completed=user.profile_completed,
    )


def _set_session_cookie(response: Response, token: str, expires_in: int) -> None:
    response.set_cookie(
        key=session_cookie_name(),
        value=token,
        httponly=True,
        secure=get_settings().jwt_cookie_secure,
        samesite="lax",
        max_age=expires_in,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=session_cookie_name(),
        path="/",
        samesite="lax",
        secure=get_settings().jwt_cookie_secure,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, response: Response):
    """Inicia sesión: devuelve el token y lo deja también en cookie httpOnly."""
    user = authenticate_user(req.email, req.password)
    if not user:
        raise unauthorized("Credenciales inválidas.")

    token, expires_in = create_session_token(user)
    _set_session_cookie(response, token, expires_in)

    return LoginResponse(
        access_token=token,
        expires_in=expires_in,
        user=_to_user_response(user),
    )


@router.post("/logout")
def logout(response: Response):
    """Cierra sesión. No requiere autenticación: es idempotente."""
    _clear_session_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=SessionResponse)
def me(session: SessionToken = Depends(require_session())):
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        role=session.role,
        is_approved=session.is_approved,
        profile_completed=session.profile_completed,
    )
