"""Configuration management using Pydantic Settings."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Config file location
CONFIG_PATH = Path.home() / ".config" / "eg-auth" / "config.yaml"

# Login methods in the order they are tried
LOGIN_METHODS = (
    "device_auth",
    "exchange_code",
    "authorization_code",
    "refresh_token",
    "device_code",
)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML config file."""

    def get_field_value(
        self, field: Any, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get field value from YAML config."""
        config = load_config()
        if field_name in config:
            return config[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all config values."""
        return load_config()


class AuthConfig(BaseModel):
    """Login method selection.

    Credential fields accept an inline mapping, a callable (sync or async)
    producing the value, a path to a ``.json`` file, or a plain string.
    Both ``camelCase`` and ``snake_case`` keys are accepted.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    device_auth: Any = Field(default=None, alias="deviceAuth")
    exchange_code: Any = Field(default=None, alias="exchangeCode")
    authorization_code: Any = Field(default=None, alias="authorizationCode")
    refresh_token: Any = Field(default=None, alias="refreshToken")
    device_code: bool = Field(default=False, alias="deviceCode")
    check_eula: bool = Field(default=False, alias="checkEULA")

    def selected_method(self) -> str | None:
        """Return the first configured login method, or None."""
        for method in LOGIN_METHODS:
            if getattr(self, method):
                return method
        return None


def coerce_auth_config(config: "AuthConfig | Mapping[str, Any] | None") -> AuthConfig:
    """Build an AuthConfig from a mapping, or pass an existing one through."""
    if config is None:
        return AuthConfig()
    if isinstance(config, AuthConfig):
        return config
    return AuthConfig.model_validate(dict(config))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EG_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    timeout: int = Field(default=30, ge=5, le=120, description="HTTP timeout in seconds")
    device_code_timeout: float = Field(
        default=300,
        gt=0,
        description="How long to poll for device code approval, in seconds",
    )
    refresh_threshold_minutes: int = Field(
        default=10,
        ge=0,
        description="Reauthenticate when the access token expires within this many minutes",
    )
    user_agent: str = Field(default="eg-auth/0.1.0", description="User-Agent header")
    auth: AuthConfig = Field(default_factory=AuthConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources - priority: env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None


def load_config() -> dict[str, Any]:
    """Load config from YAML file.

    Returns:
        Dictionary of config values, empty dict if file doesn't exist or is invalid.
    """
    if not CONFIG_PATH.exists():
        return {}
    try:
        with open(CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError:
        return {}


def save_config(config: dict[str, Any]) -> None:
    """Save config to YAML file.

    Args:
        config: Dictionary of config values to save.
    """
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_PATH, "w") as f:
        yaml.dump(config, f, default_flow_style=False, allow_unicode=True)
