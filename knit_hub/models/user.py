"""
User Model.

Identity record owned by the external identity provider.  This
application only reads it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Represents the signed-in identity.

    ``id`` is the Supabase auth UUID, stable across sessions.  ``email``
    is optional because some providers do not share it.
    """

    id: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}
