"""Tests for Pydantic models, configuration, and structured logging."""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from knit_hub.config import AppConfig
from knit_hub.logger import JSONFormatter, get_logger
from knit_hub.models.content_models import ActivityItem
from knit_hub.models.enums import AuthEvent, AuthViewState
from knit_hub.models.tracking import TrackingRecord
from knit_hub.utils.audit import log_audit_event

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


class TestTrackingRecord:
    def test_new_row_payload(self):
        record = TrackingRecord(
            user_id="u1", app="knit-community-hub", email="u1@example.com",
            login_cnt=1, last_login_ts=NOW, created_at=NOW,
        )

        assert record.to_row() == {
            "user_id": "u1",
            "app": "knit-community-hub",
            "email": "u1@example.com",
            "login_cnt": 1,
            "last_login_ts": "2024-03-01T09:30:00+00:00",
            "created_at": "2024-03-01T09:30:00+00:00",
        }

    def test_naive_timestamps_are_treated_as_utc(self):
        record = TrackingRecord(
            user_id="u1", app="a", login_cnt=2, last_login_ts=datetime(2024, 3, 1, 9, 30),
        )

        assert record.to_row()["last_login_ts"] == "2024-03-01T09:30:00+00:00"

    def test_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            TrackingRecord(user_id="u1", app="a", login_cnt=0, last_login_ts=NOW)

    def test_user_id_required(self):
        with pytest.raises(ValidationError):
            TrackingRecord(user_id="", app="a", login_cnt=1, last_login_ts=NOW)

    def test_last_login_cannot_precede_creation(self):
        with pytest.raises(ValidationError):
            TrackingRecord(
                user_id="u1", app="a", login_cnt=1,
                last_login_ts=NOW - timedelta(seconds=1), created_at=NOW,
            )


class TestEnums:
    def test_auth_events_compare_to_strings(self):
        assert AuthEvent("SIGNED_IN") is AuthEvent.SIGNED_IN
        assert AuthViewState.LOADING == "loading"

    def test_unknown_event_is_not_a_member(self):
        with pytest.raises(ValueError):
            AuthEvent("TOKEN_REFRESHED")


class TestContentModels:
    def test_activity_initial(self):
        assert ActivityItem(user="Sarah M.", action="joined", time="now").initial == "S"


class TestAppConfig:
    def test_defaults(self, monkeypatch):
        for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "APP_SLUG", "OAUTH_CALLBACK_PORT"):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig(_env_file=None)

        assert config.SUPABASE_URL == "https://api.srv936332.hstgr.cloud"
        assert config.APP_SLUG == "knit-community-hub"
        assert config.TRACKING_TABLE == "user_tracking"
        assert config.OAUTH_PROVIDER == "google"
        assert config.SUPABASE_ANON_KEY.get_secret_value().startswith("eyJ")
        assert config.OAUTH_CALLBACK_HOST == "127.0.0.1"
        assert config.OAUTH_CALLBACK_PORT == 8765

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("APP_SLUG", "yarn-swap")
        monkeypatch.setenv("OAUTH_CALLBACK_PORT", "9100")

        config = AppConfig(_env_file=None)

        assert config.APP_SLUG == "yarn-swap"
        assert config.OAUTH_CALLBACK_PORT == 9100

    def test_empty_url_warns(self, monkeypatch, caplog):
        monkeypatch.setenv("SUPABASE_URL", "")

        with caplog.at_level(logging.WARNING, logger="knit_hub.config"):
            AppConfig(_env_file=None)

        assert any("SUPABASE_URL is empty" in r.getMessage() for r in caplog.records)


class TestStructuredLogging:
    def test_json_formatter_includes_extra_fields(self):
        record = logging.LogRecord(
            name="knit_hub.tracking", level=logging.INFO, pathname=__file__, lineno=1,
            msg="Signed in: %s", args=("u1",), exc_info=None,
        )
        record.user_id = "u1"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger_name"] == "knit_hub.tracking"
        assert entry["message"] == "Signed in: u1"
        assert entry["extra"] == {"user_id": "u1"}
        assert "app" not in entry

    def test_json_formatter_stamps_app_and_redacts_tokens(self):
        record = logging.LogRecord(
            name="knit_hub.oauth", level=logging.WARNING, pathname=__file__, lineno=1,
            msg="exchange failed", args=(), exc_info=None,
        )
        record.auth_code = "pkce-secret"
        record.login_cnt = 3

        entry = json.loads(JSONFormatter(app="knit-community-hub").format(record))

        assert entry["app"] == "knit-community-hub"
        assert entry["extra"] == {"auth_code": "[redacted]", "login_cnt": 3}

    def test_get_logger_prefixes_package_name(self):
        assert get_logger("tracking").logger.name == "knit_hub.tracking"
        assert get_logger("knit_hub.session").logger.name == "knit_hub.session"

    def test_audit_event_is_logged(self, logger, caplog):
        with caplog.at_level(logging.INFO):
            event = log_audit_event(
                logger=logger,
                action="LOGIN_TRACKED",
                entity_type="TrackingRecord",
                entity_id="u1:knit-community-hub",
                user_id="u1",
                details={"login_cnt": 3},
            )

        assert event.details == {"login_cnt": 3}
        message = caplog.records[-1].getMessage()
        assert message.startswith("AUDIT: ")
        assert json.loads(message[len("AUDIT: "):])["action"] == "LOGIN_TRACKED"
