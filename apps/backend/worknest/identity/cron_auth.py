"""
===============================================================================
TARJETA CRC — identity/cron_auth.py
===============================================================================

Módulo:
    Autorización de llamadas del scheduler externo (cron)

Responsabilidades:
    - Validar `Authorization: Bearer <CRON_SECRET>` en tiempo constante.
    - Aceptar opcionalmente el header marcador del scheduler de la plataforma.

Colaboradores:
    - crosscutting.config.get_settings: cron_secret
    - api/cron_routes.py

Reglas:
    - CRON_SECRET vacío => ningún bearer matchea (fail-closed).
===============================================================================
"""

from __future__ import annotations

import hmac

from ..crosscutting.config import get_settings

SCHEDULER_MARKER_HEADER = "x-vercel-cron"
SCHEDULER_MARKER_VALUE = "1"


def has_valid_cron_secret(authorization: str | None, secret: str | None = None) -> bool:
    configured = get_settings().cron_secret if secret is None else secret
    if not configured or not authorization:
        return False
    expected = f"Bearer {configured}"
    return hmac.compare_digest(authorization.encode(), expected.encode())


def is_authorized_cron_call(
    authorization: str | None,
    scheduler_marker: str | None,
    *,
    allow_scheduler_marker: bool,
) -> bool:
    if has_valid_cron_secret(authorization):
        return True
    return allow_scheduler_marker and scheduler_marker == SCHEDULER_MARKER_VALUE
