"""Tests for application configuration loading."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from autoticket.core.config import Settings, get_settings


class TestSettingsDefaults:
    """Settings should load with sane defaults (no .env required)."""

    def test_settings_loads_without_env_file(self):
        with patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None)
        assert s.app_env == "development"
        assert s.ticket_store_url is None
        assert s.uses_stub_store is True

    def test_default_env_is_development(self):
        s = Settings(_env_file=None)
        assert s.is_development is True
        assert s.is_production is False
        assert s.is_testing is False

    def test_no_store_timeout_by_default(self):
        assert Settings(_env_file=None).ticket_store_timeout is None

    def test_query_policy_defaults(self):
        s = Settings(_env_file=None)
        assert s.unknown_mode_policy == "fallback"
        assert s.retry_policy == "all"

    def test_currency_default(self):
        assert Settings(_env_file=None).currency_symbol == "R"

    def test_cors_defaults(self):
        s = Settings(_env_file=None)
        assert s.cors_origins == "*"
        assert s.cors_origin_list == ["*"]


class TestSettingsFromEnv:
    """Settings load from environment variables correctly."""

    def test_override_via_env(self):
        overrides = {
            "APP_ENV": "production",
            "TICKET_STORE_URL": "https://tickets.example.com/api",
            "TICKET_STORE_TIMEOUT": "7.5",
            "RETRY_POLICY": "last",
        }
        with patch.dict(os.environ, overrides, clear=False):
            s = Settings(_env_file=None)
        assert s.is_production is True
        assert s.ticket_store_url == "https://tickets.example.com/api"
        assert s.ticket_store_timeout == 7.5
        assert s.retry_policy == "last"
        assert s.uses_stub_store is False

    def test_invalid_policy_rejected(self):
        with patch.dict(os.environ, {"UNKNOWN_MODE_POLICY": "ignore"}, clear=False):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_cors_parsing_multiple(self):
        with patch.dict(os.environ, {"CORS_ORIGINS": "http://a.com, http://b.com"}, clear=False):
            s = Settings(_env_file=None)
        assert s.cors_origin_list == ["http://a.com", "http://b.com"]

    def test_extra_fields_ignored(self):
        with patch.dict(os.environ, {"SOME_RANDOM_VAR": "xyz"}, clear=False):
            s = Settings(_env_file=None)
        assert not hasattr(s, "some_random_var")


class TestEnvExampleFile:
    """.env.example should be parseable and consistent."""

    def test_env_example_has_required_keys(self):
        env_example = Path(__file__).resolve().parents[2] / ".env.example"
        content = env_example.read_text()
        for key in ["APP_ENV", "LOG_LEVEL", "TICKET_STORE_URL", "UNKNOWN_MODE_POLICY", "RETRY_POLICY"]:
            assert key in content, f".env.example missing {key}"


class TestGetSettings:
    def test_returns_settings_instance(self):
        assert isinstance(get_settings(), Settings)
