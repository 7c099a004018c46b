"""Exceptions for the authentication manager."""

from typing import Any


class AuthError(Exception):
    """Base exception for authentication errors."""

    def __init__(self, message: str, response: Any = None):
        super().__init__(message)
        self.response = response


class NoAuthMethodConfigured(AuthError):
    """No login method is present in the auth config."""

    def __init__(self):
        super().__init__(
            "No valid auth method found! Please provide one in the client config"
        )


class InvalidCredentialInput(AuthError):
    """A credential field has an unsupported runtime type or shape."""

    def __init__(self, value: Any, field: str, reason: str | None = None):
        self.field = field
        self.type_name = type(value).__name__
        msg = reason or f"{self.type_name} is not a valid {field} type"
        super().__init__(msg)


class CredentialFileError(AuthError):
    """A credential file is missing or not valid JSON."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The file {path} is not existing or formatted incorrectly")


class DeviceCodeTimeout(AuthError):
    """The device code was not approved before the polling deadline."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Device code timeout of {timeout_ms}ms exceeded")


class TransportFailure(AuthError):
    """The HTTP transport reported a non-success response."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message, response)
        self.status_code = status_code


class TokenInvalid(AuthError):
    """The access token was rejected by the verify endpoint."""


class AuthenticationFailed(AuthError):
    """Raised by Client.login when authentication did not succeed."""

    def __init__(self, result: Any):
        self.result = result
        response = getattr(result, "response", None)
        super().__init__(f"Authentication failed: {response}", response)
