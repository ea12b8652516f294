"""
Authentication Models.

Pydantic models for the contracts between the remote service adapter,
the auth services, and the UI layer.  Every auth action returns a
structured, inspectable ``AuthResult`` rather than raising into the UI.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from knit_hub.models.enums import AuthErrorCode
from knit_hub.models.user import User


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class AuthSession(BaseModel):
    """Proof of authentication issued by the remote identity service.

    Attributes
    ----------
    user:
        The identity the session belongs to.
    access_token:
        Short-lived JWT, when the remote client exposes it.
    expires_at:
        Unix timestamp (seconds) of access-token expiry.
    """

    user: User
    access_token: Optional[str] = None
    expires_at: Optional[int] = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Unified auth response
# ---------------------------------------------------------------------------

class AuthResult(BaseModel):
    """Unified response for sign-in and sign-out actions.

    Attributes
    ----------
    success:
        ``True`` when the remote service accepted the request.
    error_code:
        Structured error category (``None`` on success).
    error_message:
        Human-readable error description (``None`` on success).
    redirect_url:
        Provider authorisation URL opened for an OAuth sign-in.
    """

    success: bool
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    redirect_url: Optional[str] = None

    model_config = {"from_attributes": True}
