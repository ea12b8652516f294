"""
Business Logic Services Package.

Services depend on the Repository layer for table access and on the
``RemoteClientLoader`` for the remote handle.

The ``create_services()`` factory wires every service together,
returning a typed dict that the UI layer can consume without knowing the
internal dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from knit_hub.auth import SessionManager
from knit_hub.client_loader import RemoteClientLoader
from knit_hub.config import AppConfig
from knit_hub.logger import get_logger
from knit_hub.services.auth_service import AuthService
from knit_hub.services.login_tracker import LoginTrackerService
from knit_hub.services.oauth_callback import OAuthCallbackServer
from knit_hub.services.session_observer import SessionObserverService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    auth_service: AuthService
    login_tracker_service: LoginTrackerService
    session_observer_service: SessionObserverService
    oauth_callback_server: OAuthCallbackServer


def create_services(
    config: AppConfig,
    loader: RemoteClientLoader,
    session: SessionManager,
) -> ServiceContainer:
    """
    Wire all services together.

    This is the single composition root for the service layer.  The
    application entry-point calls this once at startup.

    Args:
        config: Application configuration.
        loader: Holder of the remote-service handle.
        session: Shared view-state holder.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    login_tracker_service = LoginTrackerService(
        app_slug=config.APP_SLUG,
        table=config.TRACKING_TABLE,
        logger=get_logger("tracking"),
    )
    session_observer_service = SessionObserverService(
        session=session,
        tracker=login_tracker_service,
        logger=get_logger("session"),
    )
    oauth_callback_server = OAuthCallbackServer(
        loader=loader,
        host=config.OAUTH_CALLBACK_HOST,
        port=config.OAUTH_CALLBACK_PORT,
        logger=get_logger("oauth"),
    )
    auth_service = AuthService(
        loader=loader,
        provider=config.OAUTH_PROVIDER,
        redirect_to=oauth_callback_server.origin,
        logger=get_logger("auth"),
    )

    return ServiceContainer(
        auth_service=auth_service,
        login_tracker_service=login_tracker_service,
        session_observer_service=session_observer_service,
        oauth_callback_server=oauth_callback_server,
    )
