"""
Repository Layer Package.

Provides data-access abstractions over the hosted table API.  All table
operations flow through repositories; services never call
``RemoteService.select_single`` or ``RemoteService.upsert`` directly.

Usage:
    from knit_hub.repositories.tracking_repository import TrackingRepository
"""

from knit_hub.repositories.base_repository import BaseRepository
from knit_hub.repositories.tracking_repository import TrackingRepository

__all__ = [
    "BaseRepository",
    "TrackingRepository",
]
