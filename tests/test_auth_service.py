"""Tests for AuthService sign-in / sign-out actions."""

import webbrowser

import pytest
from supabase import AuthError

from knit_hub.client_loader import RemoteClientLoader
from knit_hub.models.enums import AuthErrorCode
from knit_hub.services.auth_service import AuthService

REDIRECT = "http://127.0.0.1:8765"


class ProviderRejected(AuthError):
    """An auth-server rejection, built without version-specific arguments."""

    def __init__(self, message: str) -> None:
        Exception.__init__(self, message)
        self.message = message


class OAuthConfigMismatch(Exception):
    """Not an auth-server error despite the name."""

    status = 400


@pytest.fixture
def opened():
    return []


@pytest.fixture
def loaded(logger, remote):
    loader = RemoteClientLoader("https://example.supabase.co", "anon", logger, factory=lambda u, k: remote)
    loader.load()
    return loader


@pytest.fixture
def auth_service(loaded, logger, opened):
    def _open(url):
        opened.append(url)
        return True

    return AuthService(
        loader=loaded, provider="google", redirect_to=REDIRECT, logger=logger, open_url=_open,
    )


class TestSignIn:
    def test_requests_google_with_redirect_and_opens_browser(self, auth_service, remote, opened):
        result = auth_service.sign_in_with_google()

        assert result.success
        assert remote.oauth_requests == [("google", REDIRECT)]
        assert opened == [result.redirect_url]

    def test_noop_before_client_loaded(self, logger, opened):
        loader = RemoteClientLoader("https://example.supabase.co", "anon", logger)
        service = AuthService(loader, "google", REDIRECT, logger, open_url=opened.append)

        result = service.sign_in_with_google()

        assert not result.success
        assert result.error_code == AuthErrorCode.CLIENT_NOT_READY
        assert opened == []

    def test_noop_after_release(self, auth_service, loaded, remote):
        loaded.release()

        result = auth_service.sign_in_with_google()

        assert result.error_code == AuthErrorCode.CLIENT_NOT_READY
        assert remote.oauth_requests == []

    def test_browser_failure_still_succeeds(self, loaded, logger):
        def _fail(url):
            raise webbrowser.Error("no browser")

        service = AuthService(loaded, "google", REDIRECT, logger, open_url=_fail)

        result = service.sign_in_with_google()

        assert result.success

    @pytest.mark.parametrize(
        "error, code",
        [
            (ConnectionError("refused"), AuthErrorCode.NETWORK_ERROR),
            (TimeoutError("slow"), AuthErrorCode.NETWORK_ERROR),
            (ProviderRejected("Unsupported provider: provider is not enabled"), AuthErrorCode.PROVIDER_ERROR),
            (OAuthConfigMismatch("redirect mismatch"), AuthErrorCode.UNKNOWN_ERROR),
            (KeyError("url"), AuthErrorCode.UNKNOWN_ERROR),
        ],
    )
    def test_remote_errors_are_classified(self, auth_service, remote, opened, error, code):
        remote.sign_in_error = error

        result = auth_service.sign_in_with_google()

        assert not result.success
        assert result.error_code == code
        assert opened == []


class TestSignOut:
    def test_requests_sign_out(self, auth_service, remote):
        result = auth_service.sign_out()

        assert result.success
        assert remote.sign_out_calls == 1

    def test_noop_before_client_loaded(self, logger):
        loader = RemoteClientLoader("https://example.supabase.co", "anon", logger)
        service = AuthService(loader, "google", REDIRECT, logger)

        assert service.sign_out().error_code == AuthErrorCode.CLIENT_NOT_READY

    def test_failure_is_logged_not_raised(self, auth_service, remote):
        remote.sign_out_error = ConnectionError("offline")

        result = auth_service.sign_out()

        assert result.error_code == AuthErrorCode.NETWORK_ERROR
