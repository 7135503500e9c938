"""Tests for cf_env.core modules."""
from __future__ import annotations

import logging

import pytest
import structlog

from cf_env.core.env import get_raw, require_raw
from cf_env.core.errors import (
    CfEnvError,
    EnvMalformedError,
    EnvMissingError,
    ExtractError,
    MalformedCredentialsError,
    NotFoundError,
    ParseError,
    ShapeMismatchError,
)


# ── errors ─────────────────────────────────────────────────────────────────

class TestErrors:
    def test_env_missing_message(self):
        e = EnvMissingError("USER")
        assert e.code == "env_missing"
        assert e.stage == "environment"
        assert e.variable == "USER"
        assert str(e) == "environment variable 'USER' is not set"

    def test_env_malformed_keeps_reason(self):
        e = EnvMalformedError("PORT", "isn't a valid port number")
        assert e.reason == "isn't a valid port number"
        assert "PORT" in e.user_message
        assert isinstance(e, CfEnvError)

    def test_parse_error_fields_in_dict(self):
        e = ParseError(fields={"postgresql": "expected an array of bindings"})
        d = e.to_dict()
        assert d["error"]["code"] == "malformed"
        assert d["error"]["stage"] == "parse"
        assert d["error"]["fields"] == {"postgresql": "expected an array of bindings"}

    def test_not_found_is_lookup_stage(self):
        e = NotFoundError(user_message="service 'db' is not present in VCAP_SERVICES")
        assert e.stage == "lookup"
        assert "db" in str(e)

    def test_extract_errors_share_a_base(self):
        assert issubclass(ShapeMismatchError, ExtractError)
        assert issubclass(MalformedCredentialsError, ExtractError)
        assert ShapeMismatchError().code != MalformedCredentialsError().code
        assert ShapeMismatchError().stage == "extract"

    def test_metadata_is_kept(self):
        e = NotFoundError(user_message="missing", name="db1")
        assert e.metadata == {"name": "db1"}

    def test_detail_defaults_to_user_message(self):
        e = ParseError(user_message="bad json")
        assert e.detail == "bad json"


# ── env ────────────────────────────────────────────────────────────────────

class TestEnv:
    def test_get_raw_returns_value(self, monkeypatch):
        monkeypatch.setenv("CF_ENV_TEST_VAR", "hello")
        assert get_raw("CF_ENV_TEST_VAR") == "hello"

    def test_get_raw_absent_is_none(self, monkeypatch):
        monkeypatch.delenv("CF_ENV_TEST_VAR", raising=False)
        assert get_raw("CF_ENV_TEST_VAR") is None

    def test_empty_string_is_a_value(self, monkeypatch):
        monkeypatch.setenv("CF_ENV_TEST_VAR", "")
        assert get_raw("CF_ENV_TEST_VAR") == ""
        assert require_raw("CF_ENV_TEST_VAR") == ""

    def test_require_raw_missing(self, monkeypatch):
        monkeypatch.delenv("CF_ENV_TEST_VAR", raising=False)
        with pytest.raises(EnvMissingError) as exc_info:
            require_raw("CF_ENV_TEST_VAR")
        assert exc_info.value.variable == "CF_ENV_TEST_VAR"


# ── config ─────────────────────────────────────────────────────────────────

class TestConfig:
    def test_defaults(self):
        from cf_env.core.config import get_config
        config = get_config()
        assert config.services_variable == "VCAP_SERVICES"
        assert config.application_variable == "VCAP_APPLICATION"

    def test_env_override(self, monkeypatch):
        from cf_env.core.config import _reset_config, get_config
        monkeypatch.setenv("CF_ENV_SERVICES_VARIABLE", "MY_SERVICES")
        _reset_config()
        assert get_config().services_variable == "MY_SERVICES"

    def test_config_is_cached(self):
        from cf_env.core.config import get_config
        assert get_config() is get_config()

    def test_invalid_log_format(self, monkeypatch):
        from pydantic import ValidationError
        from cf_env.core.config import CfEnvConfig
        monkeypatch.setenv("CF_ENV_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            CfEnvConfig()

    def test_log_level_upper_cased(self, monkeypatch):
        from cf_env.core.config import CfEnvConfig
        monkeypatch.setenv("CF_ENV_LOG_LEVEL", "debug")
        assert CfEnvConfig().log_level == "DEBUG"


# ── logging ────────────────────────────────────────────────────────────────

class TestLogging:
    def test_redacts_credentials(self):
        from cf_env.core.logging import _redact_processor
        event = {"event": "binding.resolved", "credentials": {"password": "pw"}, "name": "db1"}
        result = _redact_processor(None, "debug", event)
        assert result["credentials"] == "[REDACTED]"
        assert result["name"] == "db1"

    def test_redaction_is_case_insensitive(self):
        from cf_env.core.logging import _redact_processor
        result = _redact_processor(None, "info", {"URI": "postgres://u:p@h/d"})
        assert result["URI"] == "[REDACTED]"

    def test_get_logger_returns_logger(self):
        from cf_env.core.logging import get_logger
        log = get_logger("cf_env.test")
        assert hasattr(log, "debug")
        assert hasattr(log, "warning")

    def test_host_structlog_config_survives(self):
        from cf_env.core.logging import get_logger

        def host_marker(logger, method, event_dict):
            return event_dict

        saved = structlog.get_config()
        try:
            structlog.configure(processors=[host_marker, structlog.processors.JSONRenderer()])
            get_logger("cf_env.test").warning("binding.not_found", name="db1")
            assert host_marker in structlog.get_config()["processors"]
        finally:
            structlog.configure(**saved)

    def test_no_output_handler_installed(self):
        import cf_env.core.logging  # noqa: F401
        handlers = logging.getLogger("cf_env").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)
        assert not any(type(h) is logging.StreamHandler for h in handlers)

    def test_records_reach_host_handlers_redacted(self, caplog):
        from cf_env.core.logging import get_logger
        caplog.set_level(logging.DEBUG, logger="cf_env")
        get_logger("cf_env.test").warning(
            "binding.resolved", name="db1", credentials={"password": "s3cr3t-value"}
        )
        assert "binding.resolved" in caplog.text
        assert "[REDACTED]" in caplog.text
        assert "s3cr3t-value" not in caplog.text

    def test_below_configured_level_is_dropped(self, caplog):
        from cf_env.core.logging import get_logger
        caplog.set_level(logging.DEBUG, logger="cf_env")
        get_logger("cf_env.test").debug("catalog.parsed", groups=1)
        assert "catalog.parsed" not in caplog.text
