"""Tests for Settings configuration model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hookgate.config import Settings


class TestGetFunctionModules:
    def test_parses_comma_separated(self):
        s = Settings(function_modules="app.hooks,app.jobs")
        assert s.get_function_modules() == ["app.hooks", "app.jobs"]

    def test_handles_spaces(self):
        s = Settings(function_modules=" app.hooks , app.jobs ")
        assert s.get_function_modules() == ["app.hooks", "app.jobs"]

    def test_empty_string_returns_empty_list(self):
        s = Settings(function_modules="")
        assert s.get_function_modules() == []

    def test_single_module(self):
        s = Settings(function_modules="app.hooks")
        assert s.get_function_modules() == ["app.hooks"]


class TestDefaults:
    def test_default_webhook_port(self):
        s = Settings()
        assert s.webhook_port == 8443

    def test_default_secrets_path(self):
        s = Settings()
        assert s.secrets_path == Path("data/secrets")

    def test_https_not_required_by_default(self):
        s = Settings()
        assert s.require_https is False

    def test_default_max_body_bytes(self):
        s = Settings()
        assert s.max_body_bytes == 1024 * 1024

    def test_no_overrides_by_default(self):
        s = Settings()
        assert s.receiver_secret_overrides == {}


class TestOverrides:
    def test_empty_override_is_kept(self):
        s = Settings(receiver_secret_overrides={"genericjson.foo": ""})
        assert s.receiver_secret_overrides == {"genericjson.foo": ""}


class TestImmutable:
    def test_assignment_rejected(self):
        s = Settings()
        with pytest.raises(ValidationError):
            s.webhook_port = 9000


class TestExtraForbidden:
    def test_unknown_env_var_raises(self):
        with pytest.raises(ValueError, match="extra_forbidden"):
            Settings(**{"nonexistent_field": "value"})
