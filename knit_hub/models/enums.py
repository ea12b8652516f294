"""
Shared Enumerations for Knit Community Hub Models.

All string enumerations for type-safe field constraints.
StrEnum values compare equal to their string equivalents, so values
arriving from the remote client as plain strings can be compared
directly.
"""

from __future__ import annotations
from enum import StrEnum


class AuthEvent(StrEnum):
    """Auth-state transitions the session observer acts on.

    The remote client emits more kinds (``TOKEN_REFRESHED``,
    ``USER_UPDATED``, ...); those are not members and are ignored.
    """

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class AuthViewState(StrEnum):
    """Visible state of the auth widget.

    ``LOADING`` is initial and is left exactly once, on the first
    session check or auth event.  ``AUTHENTICATED`` and ``ANONYMOUS``
    alternate for the rest of the application lifetime.
    """

    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class AuthErrorCode(StrEnum):
    """Categories of auth-action failure reported to the UI layer."""

    CLIENT_NOT_READY = "client_not_ready"
    NETWORK_ERROR = "network_error"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN_ERROR = "unknown_error"


class TrackingOutcome(StrEnum):
    """Result of a single best-effort login-tracking attempt."""

    CREATED = "created"
    INCREMENTED = "incremented"
    SKIPPED = "skipped"
    FAILED = "failed"
