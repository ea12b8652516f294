"""
Login Tracking Service.

Counts sign-ins per user per application in the remote
``user_tracking`` table.

Tracking strategy:
    - Look up the ``(user_id, app)`` row first.
    - No row: create it with ``login_cnt = 1`` and ``created_at = now``.
    - Row present: increment ``login_cnt`` by one, refresh
      ``last_login_ts`` and ``email``; ``created_at`` is never resent.
    - Best-effort: every failure is logged and swallowed.  Tracking must
      never block or fail a sign-in.

Known limitation: the lookup and the upsert are two round trips with no
compare-and-swap, so concurrent sign-ins for the same user (several
windows) can race and under-count.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable, Optional

from knit_hub.logger import StructuredLogger
from knit_hub.models.enums import TrackingOutcome
from knit_hub.models.tracking import TrackingRecord
from knit_hub.models.user import User
from knit_hub.remote_service import RemoteService
from knit_hub.repositories.tracking_repository import TrackingRepository
from knit_hub.services.base_service import BaseService
from knit_hub.utils.audit import log_audit_event

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_login_count(value: object) -> int:
    """Return a stored ``login_cnt`` as a non-negative int.

    Missing or non-numeric values count as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    return 0


class LoginTrackerService(BaseService):
    """Upserts the login-counter row on every observed sign-in.

    Parameters
    ----------
    app_slug:
        Application key stored in the ``app`` column.
    logger:
        Structured logger instance.
    table:
        Remote table name; defaults to ``user_tracking``.
    clock:
        Returns the current UTC time.  Injected by tests.
    """

    def __init__(
        self,
        app_slug: str,
        logger: StructuredLogger,
        table: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(logger)
        self._app_slug: str = app_slug
        self._table: Optional[str] = table
        self._clock: Clock = clock or _utc_now

    @property
    def app_slug(self) -> str:
        return self._app_slug

    def track_login(self, remote: RemoteService, user: User) -> TrackingOutcome:
        """Record one sign-in for *user*.  Never raises.

        *remote* is the handle captured when the sign-in was observed, so
        a tracking run already in flight completes even if the widget is
        torn down meanwhile.
        """
        if not user.id:
            self._logger.debug("Skipping login tracking: empty user id.")
            return TrackingOutcome.SKIPPED

        repo = TrackingRepository(remote, self._logger, table=self._table)

        try:
            existing = repo.find(user.id, self._app_slug)
        except Exception as exc:
            # A failed lookup says nothing about the stored count, and
            # writing login_cnt = 1 over an existing row would reset it.
            self._logger.error(
                "Error checking user tracking for %s: %s",
                user.id,
                exc,
                exc_info=True,
                extra={"event": "TRACKING_LOOKUP_FAILED", "user_id": user.id},
            )
            return TrackingOutcome.FAILED

        try:
            now = self._clock()
            if existing is None:
                record = TrackingRecord(
                    user_id=user.id,
                    app=self._app_slug,
                    email=user.email or "",
                    login_cnt=1,
                    last_login_ts=now,
                    created_at=now,
                )
                outcome = TrackingOutcome.CREATED
            else:
                record = TrackingRecord(
                    user_id=user.id,
                    app=self._app_slug,
                    email=user.email or "",
                    login_cnt=coerce_login_count(existing.get("login_cnt")) + 1,
                    last_login_ts=now,
                )
                outcome = TrackingOutcome.INCREMENTED
            repo.upsert(record)
        except Exception as exc:
            self._logger.error(
                "Error tracking user login for %s: %s",
                user.id,
                exc,
                exc_info=True,
                extra={"event": "TRACKING_UPSERT_FAILED", "user_id": user.id},
            )
            return TrackingOutcome.FAILED

        log_audit_event(
            logger=self._logger,
            action="LOGIN_TRACKED",
            entity_type="TrackingRecord",
            entity_id=f"{user.id}:{self._app_slug}",
            user_id=user.id,
            details={"outcome": str(outcome), "login_cnt": record.login_cnt},
        )
        return outcome
