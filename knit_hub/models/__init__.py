"""
Data Models Package.

Re-exports all Pydantic models and enumerations:
    from knit_hub.models import User, AuthSession, AuthResult, TrackingRecord
    from knit_hub.models import AuthEvent, AuthViewState, TrackingOutcome
"""

from __future__ import annotations

from knit_hub.models.auth_models import AuthResult, AuthSession
from knit_hub.models.enums import AuthErrorCode, AuthEvent, AuthViewState, TrackingOutcome
from knit_hub.models.tracking import TrackingRecord
from knit_hub.models.user import User

__all__ = [
    "AuthErrorCode",
    "AuthEvent",
    "AuthResult",
    "AuthSession",
    "AuthViewState",
    "TrackingOutcome",
    "TrackingRecord",
    "User",
]
