"""
Tracking Repository.

Data access for the ``user_tracking`` table: one login-counter row per
``(user_id, app)`` pair.
"""

from __future__ import annotations

from typing import Optional

from knit_hub.logger import StructuredLogger
from knit_hub.models.tracking import TrackingRecord
from knit_hub.remote_service import RemoteService, Row, RowNotFoundError
from knit_hub.repositories.base_repository import BaseRepository


class TrackingRepository(BaseRepository):
    """Data access layer for login-tracking rows.

    No ``delete()`` method: tracking rows are never removed by this
    application.
    """

    TABLE = "user_tracking"
    CONFLICT_KEY = "user_id,app"

    def __init__(
        self,
        remote: RemoteService,
        logger: StructuredLogger,
        table: Optional[str] = None,
    ) -> None:
        super().__init__(remote, logger)
        self._table: str = table or self.TABLE

    def find(self, user_id: str, app: str) -> Optional[Row]:
        """Fetch the row for ``(user_id, app)``, selecting ``login_cnt``.

        Returns ``None`` when no row exists.  Any other remote failure
        propagates to the caller.
        """
        try:
            return self.remote.select_single(
                self._table,
                "login_cnt",
                {"user_id": user_id, "app": app},
            )
        except RowNotFoundError:
            self._logger.debug(
                "No tracking row for %s/%s.", user_id, app,
            )
            return None

    def upsert(self, record: TrackingRecord) -> None:
        """Insert or update *record* using the ``user_id,app`` conflict key."""
        self.remote.upsert(self._table, record.to_row(), self.CONFLICT_KEY)
        self._logger.debug(
            "Tracking row upserted: %s/%s (login_cnt=%d)",
            record.user_id,
            record.app,
            record.login_cnt,
        )
