"""
Base Repository.

Provides shared infrastructure for all repositories:
- RemoteService reference (the hosted table API)
- Logger reference
"""

from __future__ import annotations

from knit_hub.logger import StructuredLogger
from knit_hub.remote_service import RemoteService


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(self, remote: RemoteService, logger: StructuredLogger) -> None:
        self._remote = remote
        self._logger = logger

    @property
    def remote(self) -> RemoteService:
        """Returns the remote service for table operations."""
        return self._remote
