"""
Knit Community Hub Desktop Application Entry Point.

Bootstraps the dependency graph via constructor injection and launches
the CustomTkinter window.  Every subsystem is wired here; no
module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import sys
import traceback

from knit_hub.auth import SessionManager
from knit_hub.client_loader import RemoteClientLoader
from knit_hub.config import get_config
from knit_hub.logger import StructuredLogger, get_logger
from knit_hub.services import create_services
from knit_hub.ui.app_shell import AppShell


def main() -> None:
    """Application entry point: wire dependencies and launch the GUI."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting Knit Community Hub...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Remote client loader (constructed lazily by the auth widget)
    # ------------------------------------------------------------------
    loader = RemoteClientLoader(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=get_logger("remote"),
    )

    # ------------------------------------------------------------------
    # 3. Session state + services (single composition root)
    # ------------------------------------------------------------------
    session = SessionManager()
    services = create_services(config=config, loader=loader, session=session)

    # ------------------------------------------------------------------
    # 4. Launch the GUI (blocks until window closes)
    # ------------------------------------------------------------------
    logger.info("Launching GUI...")
    with loader:
        app = AppShell(
            loader=loader,
            session=session,
            services=services,
            logger=get_logger("ui"),
        )
        try:
            app.mainloop()
        finally:
            services["session_observer_service"].stop()
            services["oauth_callback_server"].stop()
            logger.info("Knit Community Hub shut down.")


def _show_fatal_error(exc: BaseException) -> None:
    """Tell the user the app crashed.

    Falls back to stderr when Tk itself is unavailable.
    """
    summary = f"{type(exc).__name__}: {exc}"
    try:
        from tkinter import Tk, messagebox

        root = Tk()
        root.withdraw()
        messagebox.showerror(
            title="Knit Community Hub",
            message=f"Knit Community Hub stopped unexpectedly.\n\n{summary}",
            detail="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )
        root.destroy()
    except Exception:
        sys.stderr.write(f"FATAL: {summary}\n")
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _show_fatal_error(exc)
        sys.exit(1)
