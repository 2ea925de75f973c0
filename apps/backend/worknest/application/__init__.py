"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los servicios de aplicación compartidos:
  - CleanupTimer: respaldo in-process del cron de limpieza
  - Enrichment / enrich: lookups opcionales que degradan a None

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""

from .cleanup_timer import CleanupTimer
from .enrichment import Enrichment, enrich

__all__ = [
    "CleanupTimer",
    "Enrichment",
    "enrich",
]
