"""
Authentication Service.

Sign-in and sign-out actions for the auth widget.  Sits between the UI
layer and the remote client so the widget stays a thin click handler.

Both actions are no-ops while the remote client is not loaded, and both
log remote failures instead of raising.  Local view state is not changed
here: the resulting ``SIGNED_IN`` / ``SIGNED_OUT`` events reach
``SessionObserverService`` through the auth subscription.
"""

from __future__ import annotations

import webbrowser
from typing import Callable, Optional

from supabase import AuthError

from knit_hub.client_loader import RemoteClientLoader
from knit_hub.logger import StructuredLogger
from knit_hub.models.auth_models import AuthResult
from knit_hub.models.enums import AuthErrorCode
from knit_hub.services.base_service import BaseService

UrlOpener = Callable[[str], bool]

_NOT_READY_MESSAGE: str = "Sign-in is still loading. Please try again shortly."


class AuthService(BaseService):
    """Google OAuth sign-in and sign-out.

    Parameters
    ----------
    loader:
        Holder of the remote-service handle.
    provider:
        OAuth provider name (``google``).
    redirect_to:
        Origin the provider redirects back to after consent.
    logger:
        Structured JSON logger.
    open_url:
        Opens the provider authorisation URL; defaults to the system
        browser.
    """

    def __init__(
        self,
        loader: RemoteClientLoader,
        provider: str,
        redirect_to: str,
        logger: StructuredLogger,
        open_url: Optional[UrlOpener] = None,
    ) -> None:
        super().__init__(logger)
        self._loader: RemoteClientLoader = loader
        self._provider: str = provider
        self._redirect_to: str = redirect_to
        self._open_url: UrlOpener = open_url or webbrowser.open

    # ==================================================================
    # Sign in
    # ==================================================================

    def sign_in_with_google(self) -> AuthResult:
        """Request an OAuth redirect flow and open it in the browser."""
        if not self._loader.is_ready:
            self._logger.debug("Sign-in requested before remote client loaded.")
            return self._not_ready()

        try:
            url = self._loader.service.sign_in_with_oauth(
                self._provider, self._redirect_to,
            )
        except RuntimeError:
            # Released between the readiness check and the call.
            return self._not_ready()
        except Exception as exc:
            return self._classify_error(exc, "signing in")

        try:
            opened = self._open_url(url)
        except webbrowser.Error as exc:
            self._logger.error("Error opening browser for sign-in: %s", exc)
            opened = False
        if not opened:
            self._logger.warning(
                "Browser did not open; visit the sign-in URL manually: %s", url,
            )

        self._logger.info(
            "OAuth sign-in started (%s).", self._provider,
            extra={"event": "SIGN_IN_REQUESTED", "provider": self._provider},
        )
        return AuthResult(success=True, redirect_url=url)

    # ==================================================================
    # Sign out
    # ==================================================================

    def sign_out(self) -> AuthResult:
        """Request termination of the remote session."""
        if not self._loader.is_ready:
            self._logger.debug("Sign-out requested before remote client loaded.")
            return self._not_ready()

        try:
            self._loader.service.sign_out()
        except RuntimeError:
            return self._not_ready()
        except Exception as exc:
            return self._classify_error(exc, "signing out")

        self._logger.info("Sign-out requested.", extra={"event": "SIGN_OUT_REQUESTED"})
        return AuthResult(success=True)

    # ==================================================================
    # Error classification
    # ==================================================================

    @staticmethod
    def _not_ready() -> AuthResult:
        return AuthResult(
            success=False,
            error_code=AuthErrorCode.CLIENT_NOT_READY,
            error_message=_NOT_READY_MESSAGE,
        )

    def _classify_error(self, exc: Exception, action: str) -> AuthResult:
        """Log *exc* and map it to a structured ``AuthResult``."""
        self._logger.error("Error %s: %s", action, exc)

        if isinstance(exc, (ConnectionError, TimeoutError)):
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message="Cannot reach the server. Check your internet connection.",
            )

        # Rejections from the auth server; anything else is unexpected.
        if isinstance(exc, AuthError):
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.PROVIDER_ERROR,
                error_message=str(exc) or "The sign-in provider rejected the request.",
            )

        return AuthResult(
            success=False,
            error_code=AuthErrorCode.UNKNOWN_ERROR,
            error_message="An unexpected error occurred. Please try again later.",
        )
