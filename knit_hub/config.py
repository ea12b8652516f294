"""
Application Configuration.

Pydantic Settings model for the Knit Community Hub application.
Configuration is loaded from environment variables and .env files, with
fixed defaults for the hosted Supabase project shared across all apps.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings

# Public (non-secret) anon key of the shared Supabase project.
_DEFAULT_ANON_KEY: str = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyAgCiAgICAicm9sZSI6ICJhbm9uIiwKICAgICJpc3Mi"
    "OiAic3VwYWJhc2UtZGVtbyIsCiAgICAiaWF0IjogMTY0MTc2OTIwMCwKICAgICJleHAiOiAxNzk5NTM1"
    "NjAwCn0.dc_X5iR_VP_qT0zsiyj_I_OZ2T9FtRU2BBNWN8Bu4GE"
)


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase ---
    SUPABASE_URL: str = "https://api.srv936332.hstgr.cloud"
    SUPABASE_ANON_KEY: SecretStr = SecretStr(_DEFAULT_ANON_KEY)

    # --- Login tracking ---
    APP_SLUG: str = "knit-community-hub"
    TRACKING_TABLE: str = "user_tracking"

    # --- OAuth ---
    OAUTH_PROVIDER: str = "google"
    OAUTH_CALLBACK_HOST: str = "127.0.0.1"
    OAUTH_CALLBACK_PORT: int = 8765

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "knit_hub.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit a startup warning when the remote endpoint is unusable.

        An empty URL or key means the auth widget can never leave its
        loading state, so operators should hear about it at startup.
        """
        _log = logging.getLogger("knit_hub.config")

        if not Path(".env").exists():
            _log.debug(
                "No .env file found; using environment variables and defaults."
            )

        if not self.SUPABASE_URL:
            _log.warning(
                "SUPABASE_URL is empty. Sign-in will stay unavailable."
            )

        if not self.SUPABASE_ANON_KEY.get_secret_value():
            _log.warning(
                "SUPABASE_ANON_KEY is empty. Sign-in will stay unavailable."
            )

        return self


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    Uses a check-lock-check pattern so the fast path skips the lock while
    first initialisation stays thread-safe.  Prefer direct constructor
    injection of ``AppConfig`` in new code.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next ``get_config()`` re-reads the environment."""
    global _config_instance
    with _config_lock:
        _config_instance = None
