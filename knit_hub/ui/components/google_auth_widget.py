"""Google Auth Widget.

Header control showing the sign-in state: "Loading...", the signed-in
email with a Sign Out button, or a Sign in with Google button.

On construction the widget starts the remote client loader on a daemon
thread and, once the handle exists, starts the session observer.
``destroy()`` stops the observer, drops its view listener, and releases
the loader.

**Thin UI Rule**: no business logic.  Clicks are delegated to
``AuthService``; state comes from ``SessionManager``.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import customtkinter as ctk

from knit_hub.auth import SessionManager
from knit_hub.client_loader import RemoteClientLoader
from knit_hub.logger import StructuredLogger
from knit_hub.models.auth_models import AuthResult
from knit_hub.models.enums import AuthViewState
from knit_hub.models.user import User
from knit_hub.remote_service import RemoteService
from knit_hub.services.auth_service import AuthService
from knit_hub.services.session_observer import SessionObserverService
from knit_hub.ui.theme import (
    BUTTON_BG,
    BUTTON_BORDER,
    BUTTON_HOVER,
    BUTTON_SECONDARY_BG,
    BUTTON_SECONDARY_HOVER,
    CORNER_RADIUS,
    EMAIL_MAX_CHARS,
    FONT_BUTTON,
    FONT_SMALL,
    HEADER_BG,
    PADDING_SM,
    TEXT_MUTED,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_GOOGLE_GLYPH: str = "G"


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


class GoogleAuthWidget(ctk.CTkFrame):
    """Sign-in / sign-out control for the header.

    Parameters
    ----------
    parent:
        Header frame this widget lives in.
    loader:
        Holder of the remote-service handle; released on ``destroy()``.
    session:
        View-state holder rendered by this widget.
    observer:
        Started once the remote handle exists; stopped on ``destroy()``.
    auth_service:
        Performs the sign-in / sign-out requests.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        loader: RemoteClientLoader,
        session: SessionManager,
        observer: SessionObserverService,
        auth_service: AuthService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=HEADER_BG)

        self._loader: RemoteClientLoader = loader
        self._session: SessionManager = session
        self._observer: SessionObserverService = observer
        self._auth_service: AuthService = auth_service
        self._logger: StructuredLogger = logger
        self._destroyed: bool = False

        self._loading_label: Optional[ctk.CTkLabel] = None
        self._email_label: Optional[ctk.CTkLabel] = None
        self._sign_out_button: Optional[ctk.CTkButton] = None
        self._sign_in_button: Optional[ctk.CTkButton] = None

        self._build_ui()
        self._render(self._session.state, self._session.current_user)

        self._remove_listener: Callable[[], None] = self._session.add_listener(
            self._on_state_changed,
        )
        self._loader.on_ready(self._on_client_ready)
        threading.Thread(
            target=self._loader.load,
            name="remote-client-loader",
            daemon=True,
        ).start()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self._loading_label = ctk.CTkLabel(
            self,
            text="Loading...",
            font=FONT_SMALL,
            text_color=TEXT_MUTED,
        )

        self._email_label = ctk.CTkLabel(
            self,
            text="",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
        )

        self._sign_out_button = ctk.CTkButton(
            self,
            text="Sign Out",
            font=FONT_BUTTON,
            fg_color=BUTTON_SECONDARY_BG,
            hover_color=BUTTON_SECONDARY_HOVER,
            text_color=TEXT_PRIMARY,
            height=30,
            width=90,
            corner_radius=CORNER_RADIUS,
            command=self._handle_sign_out,
        )

        self._sign_in_button = ctk.CTkButton(
            self,
            text=f"{_GOOGLE_GLYPH}   Sign in with Google",
            font=FONT_BUTTON,
            fg_color=BUTTON_BG,
            hover_color=BUTTON_HOVER,
            text_color=TEXT_PRIMARY,
            border_width=1,
            border_color=BUTTON_BORDER,
            height=34,
            corner_radius=CORNER_RADIUS,
            command=self._handle_sign_in,
        )

    # ------------------------------------------------------------------
    # State rendering
    # ------------------------------------------------------------------

    def _on_state_changed(self, state: AuthViewState, user: Optional[User]) -> None:
        """Listener called from any thread; marshal onto the Tk thread."""
        if self._destroyed:
            return
        self.after(0, self._render, state, user)

    def _render(self, state: AuthViewState, user: Optional[User]) -> None:
        if self._destroyed:
            return
        for widget in (
            self._loading_label,
            self._email_label,
            self._sign_out_button,
            self._sign_in_button,
        ):
            widget.pack_forget()

        if state is AuthViewState.LOADING:
            self._loading_label.pack(side="right")
        elif state is AuthViewState.AUTHENTICATED and user is not None:
            self._sign_out_button.pack(side="right")
            self._email_label.configure(text=_truncate(user.email or "", EMAIL_MAX_CHARS))
            self._email_label.pack(side="right", padx=(0, PADDING_SM))
        else:
            self._sign_in_button.pack(side="right")

    # ------------------------------------------------------------------
    # Remote client lifecycle
    # ------------------------------------------------------------------

    def _on_client_ready(self, service: RemoteService) -> None:
        """Runs on the loader thread; the observer does network I/O here."""
        self._observer.start(service)

    # ------------------------------------------------------------------
    # Event Handlers
    # ------------------------------------------------------------------

    def _handle_sign_in(self) -> None:
        self._sign_in_button.configure(state="disabled")
        self._run_action(self._auth_service.sign_in_with_google, self._sign_in_button)

    def _handle_sign_out(self) -> None:
        self._sign_out_button.configure(state="disabled")
        self._run_action(self._auth_service.sign_out, self._sign_out_button)

    def _run_action(
        self,
        action: Callable[[], AuthResult],
        button: ctk.CTkButton,
    ) -> None:
        """Run *action* off the Tk thread, then re-enable *button*."""

        def _worker() -> None:
            try:
                result = action()
                if not result.success:
                    self._logger.debug(
                        "Auth action did not complete: %s", result.error_code,
                    )
            finally:
                if not self._destroyed:
                    self.after(0, lambda: button.configure(state="normal"))

        threading.Thread(target=_worker, name="auth-action", daemon=True).start()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Stop observing, drop the listener, release the remote client."""
        if not self._destroyed:
            self._destroyed = True
            self._observer.stop()
            self._remove_listener()
            self._loader.release()
        super().destroy()
