"""
===============================================================================
TARJETA CRC — identity/access_gate.py
===============================================================================

Módulo:
    Política del Access Gate (routing por rol)

Responsabilidades:
    - Decidir, como función pura de (path, sesión), si un request pasa o se
      redirige (a /login o al dashboard del rol).
    - Declarar el bypass (auth del proveedor, assets estáticos).
    - Declarar prefijos protegidos y excepciones de auto-registro hackathon.

Colaboradores:
    - identity.users.dashboard_path_for / UserRole.parse
    - identity.session.SessionToken
    - crosscutting.middleware.AccessGateMiddleware (aplica la decisión)

Invariantes:
    - Sin sesión válida nunca se llega a un prefijo protegido.
    - Un rol desconocido no se redirige ni se rechaza: pasa.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .session import SessionToken
from .users import UserRole, dashboard_path_for

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
DASHBOARD_ALIAS = "/dashboard"

BYPASS_PREFIXES: tuple[str, ...] = ("/api/auth", "/_next", "/static")
BYPASS_EXACT: frozenset[str] = frozenset({"/favicon.ico"})
STATIC_EXTENSIONS: tuple[str, ...] = (".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp")

PROTECTED_PREFIXES: tuple[str, ...] = ("/admin", "/employee", "/client", "/hackathon")
PUBLIC_HACKATHON_PREFIXES: tuple[str, ...] = ("/hackathon/signup", "/hackathon/login")

_ENTRY_PATHS = frozenset({LOGIN_PATH, SIGNUP_PATH, DASHBOARD_ALIAS})


class RedirectReason(str, Enum):
    LOGIN_REQUIRED = "login_required"
    ROLE_DASHBOARD = "role_dashboard"


@dataclass(frozen=True)
class AccessDecision:
    """allow=True => pasa; si no, redirigir a `location`."""

    allow: bool
    location: str | None = None
    reason: RedirectReason | None = None

    @classmethod
    def pass_through(cls) -> "AccessDecision":
        return cls(allow=True)

    @classmethod
    def redirect(cls, location: str, reason: RedirectReason) -> "AccessDecision":
        return cls(allow=False, location=location, reason=reason)


def is_bypassed(path: str) -> bool:
    if path in BYPASS_EXACT:
        return True
    if any(path.startswith(prefix) for prefix in BYPASS_PREFIXES):
        return True
    return path.lower().endswith(STATIC_EXTENSIONS)


def is_protected(path: str) -> bool:
    if path == DASHBOARD_ALIAS:
        return True
    if any(path.startswith(prefix) for prefix in PUBLIC_HACKATHON_PREFIXES):
        return False
    # R: prefijo de texto plano: /administrator y /clients también quedan protegidos.
    return any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES)


def decide_access(path: str, session: SessionToken | None) -> AccessDecision:
    """Decisión del gate para `path` con la sesión ya verificada (o None)."""
    if is_bypassed(path):
        return AccessDecision.pass_through()

    if session is not None:
        if path in _ENTRY_PATHS:
            role = UserRole.parse(session.role)
            if role is None:
                return AccessDecision.pass_through()
            return AccessDecision.redirect(
                dashboard_path_for(role), RedirectReason.ROLE_DASHBOARD
            )
        return AccessDecision.pass_through()

    if is_protected(path):
        return AccessDecision.redirect(LOGIN_PATH, RedirectReason.LOGIN_REQUIRED)

    return AccessDecision.pass_through()
