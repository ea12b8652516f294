"""Tests for RemoteClientLoader."""

import pytest

from conftest import FakeRemoteService
from knit_hub.client_loader import RemoteClientLoader

URL = "https://example.supabase.co"
KEY = "anon-key"


class CountingFactory:
    def __init__(self, error=None):
        self.calls = []
        self.error = error
        self.remote = FakeRemoteService()

    def __call__(self, url, key):
        self.calls.append((url, key))
        if self.error is not None:
            raise self.error
        return self.remote


class TestLoad:
    def test_constructs_once(self, logger):
        factory = CountingFactory()
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)

        first = loader.load()
        second = loader.load()

        assert first is second is factory.remote
        assert factory.calls == [(URL, KEY)]
        assert loader.is_ready
        assert loader.service is factory.remote

    @pytest.mark.parametrize("error", [ValueError("Invalid API key"), OSError("dns failure")])
    def test_failure_is_logged_and_never_retried(self, logger, error):
        factory = CountingFactory(error=error)
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)

        assert loader.load() is None
        assert loader.load() is None
        assert len(factory.calls) == 1
        assert not loader.is_ready

    @pytest.mark.parametrize("url, key", [("", KEY), (URL, "")])
    def test_missing_credentials_skip_construction(self, logger, url, key):
        factory = CountingFactory()
        loader = RemoteClientLoader(url, key, logger, factory=factory)

        assert loader.load() is None
        assert factory.calls == []

    def test_service_raises_before_load(self, logger):
        loader = RemoteClientLoader(URL, KEY, logger, factory=CountingFactory())

        with pytest.raises(RuntimeError):
            loader.service


class TestReadyCallbacks:
    def test_callback_registered_before_load_fires_on_load(self, logger):
        factory = CountingFactory()
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)
        received = []
        loader.on_ready(received.append)

        assert received == []
        loader.load()
        loader.load()

        assert received == [factory.remote]

    def test_callback_registered_after_load_fires_immediately(self, logger):
        factory = CountingFactory()
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)
        loader.load()
        received = []

        loader.on_ready(received.append)

        assert received == [factory.remote]

    def test_failing_callback_does_not_break_load(self, logger):
        factory = CountingFactory()
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)
        received = []

        def _boom(service):
            raise RuntimeError("observer exploded")

        loader.on_ready(_boom)
        loader.on_ready(received.append)

        assert loader.load() is factory.remote
        assert received == [factory.remote]

    def test_callback_not_fired_when_load_fails(self, logger):
        loader = RemoteClientLoader(
            URL, KEY, logger, factory=CountingFactory(error=TypeError("bad options")),
        )
        received = []
        loader.on_ready(received.append)

        loader.load()

        assert received == []


class TestRelease:
    def test_release_drops_handle(self, logger):
        loader = RemoteClientLoader(URL, KEY, logger, factory=CountingFactory())
        loader.load()

        loader.release()
        loader.release()

        assert not loader.is_ready
        with pytest.raises(RuntimeError):
            loader.service

    def test_released_loader_never_loads(self, logger):
        factory = CountingFactory()
        loader = RemoteClientLoader(URL, KEY, logger, factory=factory)
        received = []
        loader.on_ready(received.append)

        loader.release()
        loader.load()
        loader.on_ready(received.append)

        assert factory.calls == []
        assert received == []

    def test_context_manager_releases(self, logger):
        with RemoteClientLoader(URL, KEY, logger, factory=CountingFactory()) as loader:
            loader.load()
            assert loader.is_ready

        assert not loader.is_ready
