"""Global test configuration for Knit Community Hub."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

import pytest

from knit_hub.models.auth_models import AuthSession
from knit_hub.models.user import User
from knit_hub.remote_service import AuthStateCallback, Row, RowNotFoundError


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars(tmp_path_factory):
    """Point log output at a temp dir so tests never write into the repo."""
    log_dir = tmp_path_factory.mktemp("logs")
    defaults = {"LOG_FILE": str(log_dir / "knit_hub_test.log")}
    originals = {}
    for key, value in defaults.items():
        originals[key] = os.environ.get(key)
        os.environ[key] = value

    from knit_hub.config import reset_config
    reset_config()

    yield

    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    reset_config()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeSubscription:
    def __init__(self, remote: "FakeRemoteService", callback: AuthStateCallback) -> None:
        self._remote = remote
        self.callback = callback
        self.unsubscribed = False

    def unsubscribe(self) -> None:
        self.unsubscribed = True
        if self.callback in self._remote.callbacks:
            self._remote.callbacks.remove(self.callback)


class FakeRemoteService:
    """In-memory ``RemoteService``.  Tables are keyed by ``(user_id, app)``."""

    def __init__(self, session: Optional[AuthSession] = None) -> None:
        self.session = session
        self.tables: dict[str, dict[tuple[str, str], Row]] = {}
        self.callbacks: list[AuthStateCallback] = []
        self.subscriptions: list[FakeSubscription] = []
        self.upserts: list[tuple[str, Row, str]] = []
        self.selects: list[tuple[str, str, dict[str, str]]] = []
        self.oauth_requests: list[tuple[str, str]] = []
        self.exchanged_codes: list[str] = []
        self.sign_out_calls = 0

        self.select_error: Optional[Exception] = None
        self.upsert_error: Optional[Exception] = None
        self.session_error: Optional[Exception] = None
        self.sign_in_error: Optional[Exception] = None
        self.sign_out_error: Optional[Exception] = None
        self.exchange_error: Optional[Exception] = None
        # Runs inside get_session(), before it returns.
        self.on_get_session: Optional[Callable[[], None]] = None

    # -- Auth -----------------------------------------------------------------

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        if self.sign_in_error is not None:
            raise self.sign_in_error
        self.oauth_requests.append((provider, redirect_to))
        return f"https://accounts.example.com/authorize?provider={provider}"

    def exchange_code_for_session(self, auth_code: str) -> Optional[AuthSession]:
        if self.exchange_error is not None:
            raise self.exchange_error
        self.exchanged_codes.append(auth_code)
        return self.session

    def sign_out(self) -> None:
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.sign_out_calls += 1

    def get_session(self) -> Optional[AuthSession]:
        if self.on_get_session is not None:
            self.on_get_session()
        if self.session_error is not None:
            raise self.session_error
        return self.session

    def on_auth_state_change(self, callback: AuthStateCallback) -> FakeSubscription:
        self.callbacks.append(callback)
        subscription = FakeSubscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def emit(self, event: str, session: Optional[AuthSession]) -> None:
        for callback in list(self.callbacks):
            callback(event, session)

    # -- Tables ---------------------------------------------------------------

    def select_single(self, table: str, columns: str, filters: Mapping[str, str]) -> Row:
        self.selects.append((table, columns, dict(filters)))
        if self.select_error is not None:
            raise self.select_error
        key = (filters["user_id"], filters["app"])
        row = self.tables.get(table, {}).get(key)
        if row is None:
            raise RowNotFoundError(f"No {table} row for {dict(filters)}")
        return {column: row.get(column) for column in columns.split(",")}

    def upsert(self, table: str, row: Row, on_conflict: str) -> None:
        if self.upsert_error is not None:
            raise self.upsert_error
        self.upserts.append((table, dict(row), on_conflict))
        key = (str(row["user_id"]), str(row["app"]))
        stored = self.tables.setdefault(table, {}).setdefault(key, {})
        stored.update(row)

    def row(self, table: str, user_id: str, app: str) -> Optional[Row]:
        return self.tables.get(table, {}).get((user_id, app))


class FrozenClock:
    """Returns a fixed UTC time; ``advance()`` moves it forward."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def run_now(task: Callable[[], None]) -> None:
    """Synchronous stand-in for the daemon-thread runner."""
    task()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def logger(tmp_path):
    from knit_hub.logger import StructuredLogger

    return StructuredLogger(
        name=f"knit_hub.test.{tmp_path.name}",
        log_file=str(tmp_path / "test.log"),
    )


@pytest.fixture
def remote():
    return FakeRemoteService()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def alice():
    return User(id="user-alice", email="alice@example.com")


@pytest.fixture
def alice_session(alice):
    return AuthSession(user=alice, access_token="token-alice", expires_at=1_900_000_000)
