"""
Remote Client Loader.

Owns the single remote-service handle for the lifetime of the auth
widget.  The handle is constructed at most once; a failed construction
is logged and never retried, leaving the widget in its loading state.

Usage (dependency injection at app startup)::

    from knit_hub.client_loader import RemoteClientLoader
    from knit_hub.logger import StructuredLogger

    loader = RemoteClientLoader(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="knit_hub.remote"),
    )
    loader.on_ready(lambda service: observer.start(service))
    with loader:
        loader.load()
        ...
"""

from __future__ import annotations

import threading
from types import TracebackType
from typing import Callable, Optional

from supabase import ClientOptions, create_client

from knit_hub.logger import StructuredLogger
from knit_hub.remote_service import RemoteService, SupabaseRemoteService

ServiceFactory = Callable[[str, str], RemoteService]
ReadyCallback = Callable[[RemoteService], None]


def create_supabase_service(url: str, key: str) -> RemoteService:
    """Build a PKCE-flow Supabase client wrapped in the capability interface."""
    client = create_client(url, key, options=ClientOptions(flow_type="pkce"))
    return SupabaseRemoteService(client)


class RemoteClientLoader:
    """Constructs and holds the remote-service handle.

    Parameters
    ----------
    supabase_url:
        The Supabase project URL.
    supabase_key:
        The public anon key.  Never a service-role key.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    factory:
        Builds the handle from ``(url, key)``.  Defaults to a Supabase
        client; tests inject fakes.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
        factory: Optional[ServiceFactory] = None,
    ) -> None:
        self._url: str = supabase_url
        self._key: str = supabase_key
        self._logger: StructuredLogger = logger
        self._factory: ServiceFactory = factory or create_supabase_service
        self._lock: threading.RLock = threading.RLock()
        self._service: Optional[RemoteService] = None
        self._attempted: bool = False
        self._released: bool = False
        self._ready_callbacks: list[ReadyCallback] = []

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def service(self) -> RemoteService:
        """Return the constructed handle.

        Raises
        ------
        RuntimeError
            If the handle was never constructed, failed to construct, or
            has been released.
        """
        with self._lock:
            if self._service is None:
                raise RuntimeError(
                    "Remote client is not loaded. Sign-in is unavailable."
                )
            return self._service

    @property
    def is_ready(self) -> bool:
        """``True`` when the handle exists and has not been released."""
        with self._lock:
            return self._service is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> Optional[RemoteService]:
        """Construct the handle on the first call; return it (or ``None``).

        Subsequent calls return whatever the first call produced.  Ready
        callbacks fire once, on the thread that performed the load,
        outside the internal lock.
        """
        with self._lock:
            if self._attempted or self._released:
                return self._service
            self._attempted = True

            if not self._url or not self._key:
                self._logger.warning(
                    "Remote client not configured; sign-in stays unavailable."
                )
                return None

            try:
                service = self._factory(self._url, self._key)
            except (ValueError, TypeError) as exc:
                self._logger.error(
                    "Remote client credential format error: %s", exc,
                )
                return None
            except Exception as exc:
                self._logger.error(
                    "Unexpected remote client initialization failure: %s",
                    exc,
                    exc_info=True,
                )
                return None

            self._service = service
            callbacks = list(self._ready_callbacks)
            self._ready_callbacks.clear()

        self._logger.info("Remote client initialized.")
        for callback in callbacks:
            self._fire(callback, service)
        return service

    def on_ready(self, callback: ReadyCallback) -> None:
        """Run *callback* with the handle once it exists.

        Fires immediately when the handle is already loaded; dropped
        silently after ``release()``.
        """
        with self._lock:
            if self._released:
                return
            service = self._service
            if service is None:
                self._ready_callbacks.append(callback)
                return
        self._fire(callback, service)

    def release(self) -> None:
        """Drop the handle and any pending ready callbacks.

        Safe to call multiple times.  A released loader never loads again.
        """
        with self._lock:
            if self._released:
                return
            self._released = True
            self._service = None
            self._ready_callbacks.clear()
        self._logger.debug("Remote client released.")

    def __enter__(self) -> "RemoteClientLoader":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fire(self, callback: ReadyCallback, service: RemoteService) -> None:
        try:
            callback(service)
        except Exception as exc:
            self._logger.error(
                "Remote client ready callback failed: %s", exc, exc_info=True,
            )
