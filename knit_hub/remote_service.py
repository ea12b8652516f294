"""
Remote Service Interface.

Narrow capability interface over the hosted Supabase project: exactly
the auth and table operations this application uses, and nothing more.

- ``RemoteService`` is the structural protocol services depend on.
- ``SupabaseRemoteService`` implements it over a ``supabase-py`` client,
  translating gotrue sessions into ``AuthSession`` models and PostgREST
  "no rows" responses into ``RowNotFoundError``.

Services and repositories never touch the ``supabase`` client directly.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Protocol, Union

from postgrest.exceptions import APIError
from supabase import Client as SupabaseClient

from knit_hub.models.auth_models import AuthSession
from knit_hub.models.user import User

RowValue = Union[str, int, float, bool, None]
Row = dict[str, RowValue]
AuthStateCallback = Callable[[str, Optional[AuthSession]], None]

# PostgREST error code for ``.single()`` matching zero (or many) rows.
_NO_ROWS_CODE: str = "PGRST116"
_NO_ROWS_MARKERS: tuple[str, ...] = ("No rows found", "JSON object requested")


class RowNotFoundError(LookupError):
    """Raised by ``select_single`` when no row matches the filters."""


def is_no_rows_error(exc: BaseException) -> bool:
    """``True`` when *exc* is the remote "no matching row" condition."""
    if isinstance(exc, RowNotFoundError):
        return True
    if getattr(exc, "code", None) == _NO_ROWS_CODE:
        return True
    message = str(getattr(exc, "message", None) or exc)
    return any(marker in message for marker in _NO_ROWS_MARKERS)


class AuthSubscription(Protocol):
    """Handle returned by ``on_auth_state_change``."""

    def unsubscribe(self) -> None: ...


class RemoteService(Protocol):
    """Operations the application needs from the hosted backend."""

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        """Start an OAuth flow and return the provider authorisation URL."""
        ...

    def exchange_code_for_session(self, auth_code: str) -> Optional[AuthSession]:
        """Complete a PKCE redirect by trading *auth_code* for a session."""
        ...

    def sign_out(self) -> None: ...

    def get_session(self) -> Optional[AuthSession]: ...

    def on_auth_state_change(self, callback: AuthStateCallback) -> AuthSubscription: ...

    def select_single(
        self,
        table: str,
        columns: str,
        filters: Mapping[str, str],
    ) -> Row:
        """Return the one row matching all equality *filters*.

        Raises:
            RowNotFoundError: If no row matches.
        """
        ...

    def upsert(self, table: str, row: Row, on_conflict: str) -> None: ...


# ---------------------------------------------------------------------------
# Supabase implementation
# ---------------------------------------------------------------------------

def _to_auth_session(session: object) -> Optional[AuthSession]:
    """Convert a gotrue ``Session`` (or ``None``) into an ``AuthSession``."""
    if session is None:
        return None
    user = getattr(session, "user", None)
    if user is None:
        return None
    return AuthSession(
        user=User(id=str(getattr(user, "id", "") or ""), email=getattr(user, "email", None)),
        access_token=getattr(session, "access_token", None),
        expires_at=getattr(session, "expires_at", None),
    )


class SupabaseRemoteService:
    """``RemoteService`` backed by a ``supabase-py`` client.

    Parameters
    ----------
    client:
        An initialised Supabase client.  PKCE flow options are required
        for ``exchange_code_for_session`` to find its code verifier.
    """

    def __init__(self, client: SupabaseClient) -> None:
        self._client: SupabaseClient = client

    # -- Auth -----------------------------------------------------------------

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        response = self._client.auth.sign_in_with_oauth({
            "provider": provider,
            "options": {"redirect_to": redirect_to},
        })
        return response.url

    def exchange_code_for_session(self, auth_code: str) -> Optional[AuthSession]:
        response = self._client.auth.exchange_code_for_session({
            "auth_code": auth_code,
        })
        return _to_auth_session(response.session)

    def sign_out(self) -> None:
        self._client.auth.sign_out()

    def get_session(self) -> Optional[AuthSession]:
        return _to_auth_session(self._client.auth.get_session())

    def on_auth_state_change(self, callback: AuthStateCallback) -> AuthSubscription:
        def _forward(event: str, session: object) -> None:
            callback(str(event), _to_auth_session(session))

        return self._client.auth.on_auth_state_change(_forward)

    # -- Tables ---------------------------------------------------------------

    def select_single(
        self,
        table: str,
        columns: str,
        filters: Mapping[str, str],
    ) -> Row:
        query = self._client.table(table).select(columns)
        for column, value in filters.items():
            query = query.eq(column, value)
        try:
            response = query.single().execute()
        except APIError as exc:
            if is_no_rows_error(exc):
                raise RowNotFoundError(
                    f"No {table} row for {dict(filters)}"
                ) from exc
            raise
        if not response.data:
            raise RowNotFoundError(f"No {table} row for {dict(filters)}")
        return response.data

    def upsert(self, table: str, row: Row, on_conflict: str) -> None:
        self._client.table(table).upsert(row, on_conflict=on_conflict).execute()
