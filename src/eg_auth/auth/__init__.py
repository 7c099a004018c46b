"""Authentication module for eg-auth."""

from eg_auth.auth.authenticator import Authenticator
from eg_auth.auth.credentials import classify, load, resolve_code, resolve_device_auth
from eg_auth.auth.device_code import DeviceCodePoller
from eg_auth.auth.eula import accept_eula
from eg_auth.auth.oauth import OAuthClient

__all__ = [
    # State machine
    "Authenticator",
    # Token endpoint
    "OAuthClient",
    # Device code grant
    "DeviceCodePoller",
    # EULA
    "accept_eula",
    # Credential resolution
    "classify",
    "load",
    "resolve_code",
    "resolve_device_auth",
]
