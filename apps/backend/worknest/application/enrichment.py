"""
===============================================================================
ENRICHMENT (Optional decoration of a core answer)
===============================================================================

Name:
    Enrichment result type

Business Goal:
    Algunos datos son decoración de una respuesta (por ejemplo, quién otorgó
    un permiso). Su lookup puede fallar sin que la respuesta principal falle.

Responsibilities:
    - Ejecutar un lookup y capturar su excepción como valor (Enrichment.error).
    - Mapear el fallo a None en el punto de uso (or_none()).
    - Loguear el fallo como warning (no como error de request).

Collaborators:
    - application/usecases/permissions/resolve_permissions.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ..crosscutting.logger import logger

T = TypeVar("T")


@dataclass(frozen=True)
class Enrichment(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_none(self) -> Optional[T]:
        return self.value if self.error is None else None


def enrich(step: str, fn: Callable[..., Optional[T]], *args) -> Enrichment[T]:
    """Ejecuta `fn(*args)`; una excepción queda capturada en el resultado."""
    try:
        return Enrichment(value=fn(*args))
    except Exception as exc:
        logger.warning(
            "Enriquecimiento opcional falló",
            extra={"step": step, "error": str(exc)},
        )
        return Enrichment(error=exc)
