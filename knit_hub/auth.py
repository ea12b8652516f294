"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that holds the signed-in user
and the visible auth state (loading / authenticated / anonymous) for the
lifetime of the application window.

Usage::

    from knit_hub.auth import SessionManager
    from knit_hub.models.user import User

    session = SessionManager()
    remove = session.add_listener(lambda state, user: print(state, user))
    session.set_current_user(User(id="abc-123", email="user@example.com"))
    remove()
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from knit_hub.models.enums import AuthViewState
from knit_hub.models.user import User

StateListener = Callable[[AuthViewState, Optional[User]], None]


class SessionManager:
    """Injectable holder for the current user and view state.

    State starts at ``LOADING``.  ``set_current_user`` moves to
    ``AUTHENTICATED``; ``clear`` moves to ``ANONYMOUS`` from any state.
    Listeners are notified after every change, outside the lock, on the
    thread that made the change.
    """

    def __init__(self) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._state: AuthViewState = AuthViewState.LOADING
        self._current_user: Optional[User] = None
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_current_user(self, user: User) -> None:
        """Record *user* as the authenticated session user."""
        self._transition(AuthViewState.AUTHENTICATED, user)

    def clear(self) -> None:
        """Remove the current user, ending the session."""
        self._transition(AuthViewState.ANONYMOUS, None)

    def mark_loaded(self) -> None:
        """Leave ``LOADING`` as anonymous; no-op once loading has ended."""
        with self._lock:
            if self._state is not AuthViewState.LOADING:
                return
        self._transition(AuthViewState.ANONYMOUS, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[User]:
        with self._lock:
            return self._current_user

    @property
    def state(self) -> AuthViewState:
        with self._lock:
            return self._state

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener*; return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    def _transition(self, state: AuthViewState, user: Optional[User]) -> None:
        with self._lock:
            if self._state is state and self._current_user == user:
                return
            self._state = state
            self._current_user = user
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state, user)
