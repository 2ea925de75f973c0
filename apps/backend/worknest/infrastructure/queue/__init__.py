"""
===============================================================================
SUBSISTEMA: Infraestructura / Queue
===============================================================================

CRC CARD (Package)
-------------------------------------------------------------------------------
Nombre:
    infrastructure.queue

Responsabilidades:
    - Exponer el adaptador RQ de mantenimiento y su configuración.
===============================================================================
"""

from .errors import QueueConfigurationError, QueueEnqueueError, QueueError
from .rq_queue import RQMaintenanceQueue, RQQueueConfig

__all__ = [
    "RQMaintenanceQueue",
    "RQQueueConfig",
    "QueueError",
    "QueueConfigurationError",
    "QueueEnqueueError",
]
