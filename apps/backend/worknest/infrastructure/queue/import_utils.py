"""
===============================================================================
SUBSISTEMA: Infraestructura / Queue
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Validación de Job Paths

Responsabilidades:
    - Verificar que un "dotted path" (module.attr) apunte a un callable
      importable antes de encolarlo: el worker lo importa por nombre.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module


@lru_cache(maxsize=32)
def is_importable_dotted_path(dotted_path: str) -> bool:
    """True si `dotted_path` existe y es callable. Cacheado por path."""
    if not dotted_path or "." not in dotted_path:
        return False
    module_name, attr_name = dotted_path.rsplit(".", 1)
    if not module_name or not attr_name:
        return False
    try:
        module = import_module(module_name)
    except ModuleNotFoundError:
        return False
    return callable(getattr(module, attr_name, None))
