"""eg-auth - OAuth token manager for the account service."""

from eg_auth.auth import Authenticator
from eg_auth.client import Client
from eg_auth.config import AuthConfig, Settings, get_settings
from eg_auth.exceptions import (
    AuthError,
    AuthenticationFailed,
    CredentialFileError,
    DeviceCodeTimeout,
    InvalidCredentialInput,
    NoAuthMethodConfigured,
    TokenInvalid,
    TransportFailure,
)
from eg_auth.models import AccountIdentity, AuthData, AuthResult, AuthState, DeviceAuth

__version__ = "0.1.0"

__all__ = [
    "Client",
    "Authenticator",
    "AuthConfig",
    "Settings",
    "get_settings",
    "AuthResult",
    "AuthData",
    "AccountIdentity",
    "AuthState",
    "DeviceAuth",
    "AuthError",
    "AuthenticationFailed",
    "CredentialFileError",
    "DeviceCodeTimeout",
    "InvalidCredentialInput",
    "NoAuthMethodConfigured",
    "TokenInvalid",
    "TransportFailure",
]
