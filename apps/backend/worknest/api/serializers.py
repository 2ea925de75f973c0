"""
Helpers de serialización compartidos por los routers.

Las respuestas de permisos y cron conservan el formato camelCase que consume
el frontend (`_id`, `grantedBy`, `resetCount`, ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..application.usecases.permissions import GrantorInfo


def iso(value: datetime | None) -> str | None:
    """ISO-8601 en UTC con sufijo Z (mismo formato que Date#toISOString)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def now_iso() -> str:
    return iso(datetime.now(timezone.utc)) or ""


def grantor_json(grantor: GrantorInfo | None) -> dict[str, Any] | None:
    if grantor is None:
        return None
    return {"_id": str(grantor.id), "name": grantor.name, "email": grantor.email}
