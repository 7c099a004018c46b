"""Tests for settings and the auth config."""

import pytest
import yaml
from pydantic import ValidationError

from eg_auth.config import (
    AuthConfig,
    Settings,
    coerce_auth_config,
    get_settings,
    load_config,
    reset_settings,
    save_config,
)


class TestAuthConfig:
    """Tests for AuthConfig."""

    def test_empty_has_no_method(self):
        assert AuthConfig().selected_method() is None

    def test_camel_and_snake_case_keys(self):
        camel = AuthConfig.model_validate({"exchangeCode": "a", "checkEULA": True})
        snake = AuthConfig.model_validate({"exchange_code": "a", "check_eula": True})
        assert camel.exchange_code == snake.exchange_code == "a"
        assert camel.check_eula and snake.check_eula

    @pytest.mark.parametrize(
        "values, expected",
        [
            ({"deviceCode": True, "refreshToken": "r"}, "refresh_token"),
            ({"refreshToken": "r", "authorizationCode": "c"}, "authorization_code"),
            ({"authorizationCode": "c", "exchangeCode": "e"}, "exchange_code"),
            ({"exchangeCode": "e", "deviceAuth": {"accountId": "a"}}, "device_auth"),
            ({"deviceCode": True}, "device_code"),
            ({"exchangeCode": ""}, None),
        ],
    )
    def test_selected_method_priority(self, values, expected):
        assert AuthConfig.model_validate(values).selected_method() == expected

    def test_accepts_callables(self):
        config = AuthConfig(exchange_code=lambda: "abc")
        assert callable(config.exchange_code)

    def test_coerce(self):
        existing = AuthConfig(refresh_token="r")
        assert coerce_auth_config(existing) is existing
        assert coerce_auth_config(None) == AuthConfig()
        assert coerce_auth_config({"refreshToken": "r"}).refresh_token == "r"


class TestSettings:
    """Tests for Settings sources."""

    def test_defaults(self):
        settings = Settings()
        assert settings.timeout == 30
        assert settings.device_code_timeout == 300
        assert settings.refresh_threshold_minutes == 10
        assert settings.auth.selected_method() is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("EG_AUTH_TIMEOUT", "60")
        assert Settings().timeout == 60

    def test_yaml_source(self, isolated_config):
        isolated_config.write_text(
            yaml.dump({"timeout": 45, "auth": {"deviceAuth": "device_auth.json", "checkEULA": True}})
        )

        settings = Settings()

        assert settings.timeout == 45
        assert settings.auth.device_auth == "device_auth.json"
        assert settings.auth.check_eula is True

    def test_env_beats_yaml(self, isolated_config, monkeypatch):
        isolated_config.write_text(yaml.dump({"timeout": 45}))
        monkeypatch.setenv("EG_AUTH_TIMEOUT", "90")

        assert Settings().timeout == 90

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            Settings(timeout=1)

    def test_global_settings_cached(self):
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first


class TestConfigFile:
    """Tests for the YAML config helpers."""

    def test_missing_file(self):
        assert load_config() == {}

    def test_save_and_load(self, isolated_config):
        save_config({"timeout": 20})
        assert isolated_config.exists()
        assert load_config() == {"timeout": 20}

    def test_invalid_yaml(self, isolated_config):
        isolated_config.write_text("timeout: [unclosed")
        assert load_config() == {}
