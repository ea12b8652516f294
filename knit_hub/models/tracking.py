"""
Login Tracking Model.

One row per ``(user_id, app)`` pair in the remote ``user_tracking``
table, counting how many times a user signed in to an application.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

RowValue = Union[str, int, None]


def _iso_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class TrackingRecord(BaseModel):
    """A per-user-per-application login counter row.

    ``created_at`` is ``None`` on the increment path: it is written once
    when the row is created and never sent again, so the stored value
    stays untouched by later upserts.
    """

    user_id: str = Field(min_length=1)
    app: str = Field(min_length=1)
    email: str = ""
    login_cnt: int = Field(ge=1)
    last_login_ts: datetime
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def _check_timestamps(self) -> "TrackingRecord":
        if self.created_at is not None and self.last_login_ts < self.created_at:
            raise ValueError("last_login_ts must not precede created_at")
        return self

    def to_row(self) -> dict[str, RowValue]:
        """Return the JSON payload sent to the table upsert."""
        row: dict[str, RowValue] = {
            "user_id": self.user_id,
            "app": self.app,
            "email": self.email,
            "login_cnt": self.login_cnt,
            "last_login_ts": _iso_utc(self.last_login_ts),
        }
        if self.created_at is not None:
            row["created_at"] = _iso_utc(self.created_at)
        return row
