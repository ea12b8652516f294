"""
OAuth Callback Receiver.

Loopback HTTP listener that serves as the redirect origin of the desktop
app.  After consent the provider redirects the browser to
``http://<host>:<port>/?code=...``; the receiver trades the code for a
session, which makes the remote client emit ``SIGNED_IN``.

The server runs on a daemon thread and is started/stopped by the
``AppShell`` together with the window.
"""

from __future__ import annotations

import threading
from enum import StrEnum
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from knit_hub.client_loader import RemoteClientLoader
from knit_hub.logger import StructuredLogger
from knit_hub.services.base_service import BaseService

_PAGE_TEMPLATE: str = (
    "<!doctype html><html><head><meta charset=\"utf-8\">"
    "<title>Knit Community Hub</title></head>"
    "<body style=\"font-family: sans-serif; text-align: center; padding-top: 4em\">"
    "<h1>{heading}</h1><p>{body}</p></body></html>"
)


class CallbackStatus(StrEnum):
    """How a single redirect request was handled."""

    EXCHANGED = "exchanged"
    PROVIDER_ERROR = "provider_error"
    EXCHANGE_FAILED = "exchange_failed"
    NOT_READY = "not_ready"
    IGNORED = "ignored"


class OAuthCallbackServer(BaseService):
    """Receive OAuth redirects on a loopback address.

    Parameters
    ----------
    loader:
        Holder of the remote-service handle that started the PKCE flow.
    host:
        Loopback interface to bind (``127.0.0.1``).
    port:
        TCP port; must match the redirect URL allowed in the Supabase
        project.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        loader: RemoteClientLoader,
        host: str,
        port: int,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._loader: RemoteClientLoader = loader
        self._host: str = host
        self._port: int = port
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._lock: threading.Lock = threading.Lock()

    @property
    def origin(self) -> str:
        return f"http://{self._host}:{self._port}"

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._server is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Bind and serve on a daemon thread.  ``False`` if binding fails."""
        with self._lock:
            if self._server is not None:
                return True
            try:
                server = ThreadingHTTPServer(
                    (self._host, self._port), self._make_handler(),
                )
            except OSError as exc:
                self._logger.error(
                    "Cannot listen for OAuth redirects on %s: %s", self.origin, exc,
                )
                return False
            server.daemon_threads = True
            self._server = server
            self._thread = threading.Thread(
                target=server.serve_forever,
                name="oauth-callback",
                daemon=True,
            )
            self._thread.start()

        self._logger.info("Listening for OAuth redirects on %s", self.origin)
        return True

    def stop(self) -> None:
        """Shut the server down.  Safe to call multiple times."""
        with self._lock:
            server = self._server
            thread = self._thread
            self._server = None
            self._thread = None
        if server is None:
            return
        server.shutdown()
        server.server_close()
        if thread is not None:
            thread.join(timeout=2.0)
        self._logger.debug("OAuth callback server stopped.")

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def handle_redirect(self, request_path: str) -> CallbackStatus:
        """Process one redirect request path (``/?code=...``)."""
        params = parse_qs(urlsplit(request_path).query)

        error = _first(params, "error")
        if error:
            self._logger.warning(
                "OAuth provider returned an error: %s (%s)",
                error,
                _first(params, "error_description") or "no description",
            )
            return CallbackStatus.PROVIDER_ERROR

        code = _first(params, "code")
        if not code:
            return CallbackStatus.IGNORED

        if not self._loader.is_ready:
            self._logger.warning("OAuth redirect received before remote client loaded.")
            return CallbackStatus.NOT_READY

        try:
            self._loader.service.exchange_code_for_session(code)
        except Exception as exc:
            self._logger.error("Error completing OAuth sign-in: %s", exc)
            return CallbackStatus.EXCHANGE_FAILED

        self._logger.info("OAuth code exchanged for a session.")
        return CallbackStatus.EXCHANGED

    def _make_handler(self) -> type[BaseHTTPRequestHandler]:
        receiver = self

        class _RedirectHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                status = receiver.handle_redirect(self.path)
                if status is CallbackStatus.IGNORED:
                    self.send_error(404)
                    return
                heading, body = _page_text(status)
                payload = _PAGE_TEMPLATE.format(heading=heading, body=body).encode("utf-8")
                self.send_response(200)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, format: str, *args: object) -> None:
                receiver._logger.debug("OAuth callback: " + format, *args)

        return _RedirectHandler


def _first(params: dict[str, list[str]], key: str) -> Optional[str]:
    values = params.get(key)
    return values[0] if values else None


def _page_text(status: CallbackStatus) -> tuple[str, str]:
    if status is CallbackStatus.EXCHANGED:
        return "You're signed in", "You can close this tab and return to Knit Community Hub."
    if status is CallbackStatus.NOT_READY:
        return "Still loading", "Knit Community Hub is not ready yet. Please try signing in again."
    return "Sign-in failed", "Please return to Knit Community Hub and try again."
