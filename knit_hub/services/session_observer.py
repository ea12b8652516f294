"""
Session Observer Service.

Keeps ``SessionManager`` in step with the remote identity service:

- one initial ``get_session()`` read that leaves the loading state;
- a persistent auth-state subscription, cancelled by ``stop()``.

``SIGNED_IN`` with a user id marks the view authenticated and dispatches
login tracking off the calling thread.  ``SIGNED_OUT`` marks it
anonymous.  Every other transition kind is ignored.

The initial read and an auth event may arrive in either order.  Once an
event has been applied, a late initial-read result only ends the loading
state; it never overwrites the newer one.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from knit_hub.auth import SessionManager
from knit_hub.logger import StructuredLogger
from knit_hub.models.auth_models import AuthSession
from knit_hub.models.enums import AuthEvent
from knit_hub.remote_service import AuthSubscription, RemoteService
from knit_hub.services.base_service import BaseService
from knit_hub.services.login_tracker import LoginTrackerService

BackgroundRunner = Callable[[Callable[[], None]], None]


def run_in_daemon_thread(task: Callable[[], None]) -> None:
    """Default runner: fire-and-forget on a daemon thread."""
    threading.Thread(target=task, name="login-tracker", daemon=True).start()


class SessionObserverService(BaseService):
    """Observe remote auth state for the lifetime of the auth widget.

    Parameters
    ----------
    session:
        View-state holder updated by this observer.
    tracker:
        Login tracker dispatched on every ``SIGNED_IN``.
    logger:
        Structured logger instance.
    run_in_background:
        Executes tracking work without blocking the auth callback.
        Tests inject a synchronous runner.
    """

    def __init__(
        self,
        session: SessionManager,
        tracker: LoginTrackerService,
        logger: StructuredLogger,
        run_in_background: Optional[BackgroundRunner] = None,
    ) -> None:
        super().__init__(logger)
        self._session: SessionManager = session
        self._tracker: LoginTrackerService = tracker
        self._run_in_background: BackgroundRunner = run_in_background or run_in_daemon_thread
        # _lock guards the flags below and is never held while SessionManager
        # listeners run.  _apply_lock orders view transitions; stop() never
        # takes it, so a listener blocked on the Tk thread cannot stall teardown.
        self._lock: threading.RLock = threading.RLock()
        self._apply_lock: threading.RLock = threading.RLock()
        self._remote: Optional[RemoteService] = None
        self._subscription: Optional[AuthSubscription] = None
        self._event_applied: bool = False
        self._stopped: bool = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, remote: RemoteService) -> None:
        """Subscribe to auth changes, then read the current session.

        Idempotent: a second call, or a call after ``stop()``, does nothing.
        """
        with self._lock:
            if self._stopped or self._remote is not None:
                return
            self._remote = remote

        try:
            subscription = remote.on_auth_state_change(self._handle_auth_event)
        except Exception as exc:
            self._logger.error(
                "Could not subscribe to auth state changes: %s", exc, exc_info=True,
            )
            subscription = None

        with self._lock:
            if self._stopped:
                # stop() ran while subscribing.
                if subscription is not None:
                    self._unsubscribe(subscription)
                return
            self._subscription = subscription

        self._check_current_session(remote)

    def stop(self) -> None:
        """Cancel the subscription.  No new transition starts afterwards.

        Never waits on view listeners.  A transition already being
        applied, and tracking runs already dispatched, are not cancelled.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            subscription = self._subscription
            self._subscription = None
        if subscription is not None:
            self._unsubscribe(subscription)
        self._logger.debug("Session observer stopped.")

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._remote is not None and not self._stopped

    # ------------------------------------------------------------------
    # Initial session read
    # ------------------------------------------------------------------

    def _check_current_session(self, remote: RemoteService) -> None:
        try:
            current: Optional[AuthSession] = remote.get_session()
        except Exception as exc:
            self._logger.warning(
                "Session check failed; treating as signed out: %s", exc,
            )
            current = None

        with self._apply_lock:
            with self._lock:
                if self._stopped:
                    return
                restore = (
                    not self._event_applied
                    and current is not None
                    and bool(current.user.id)
                )

            if restore:
                self._session.set_current_user(current.user)
                self._logger.info(
                    "Existing session restored for %s.", current.user.id,
                )
            else:
                self._session.mark_loaded()

    # ------------------------------------------------------------------
    # Auth-state callback
    # ------------------------------------------------------------------

    def _handle_auth_event(self, event: str, auth_session: Optional[AuthSession]) -> None:
        try:
            kind = AuthEvent(event)
        except ValueError:
            self._logger.debug("Ignoring auth event %s.", event)
            return

        if kind is AuthEvent.SIGNED_IN and (auth_session is None or not auth_session.user.id):
            self._logger.debug("SIGNED_IN without a user; ignored.")
            return

        with self._apply_lock:
            with self._lock:
                if self._stopped:
                    return
                remote = self._remote
                self._event_applied = True

            if kind is AuthEvent.SIGNED_OUT:
                self._session.clear()
                self._logger.info("Signed out.", extra={"event": "SIGNED_OUT"})
                return
            user = auth_session.user
            self._session.set_current_user(user)

        self._logger.info(
            "Signed in: %s", user.id,
            extra={"event": "SIGNED_IN", "user_id": user.id},
        )
        if remote is not None:
            tracker = self._tracker
            self._run_in_background(lambda: tracker.track_login(remote, user))

    def _unsubscribe(self, subscription: AuthSubscription) -> None:
        try:
            subscription.unsubscribe()
        except Exception as exc:
            self._logger.warning("Auth subscription cancel failed: %s", exc)
