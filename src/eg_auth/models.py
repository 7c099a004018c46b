"""Data models for token state, credentials and endpoint responses."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from eg_auth.exceptions import AuthError


class AuthModel(BaseModel):
    """Base model with common configuration.

    - populate_by_name: Allow both alias and field name in input
    - extra="ignore": Ignore unknown fields from API responses
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an authentication operation.

    ``response`` holds the transport body, a message, or a small status dict.
    ``error`` is set on failure.
    """

    success: bool
    response: Any = None
    error: AuthError | None = None

    @classmethod
    def ok(cls, response: Any = None) -> Self:
        return cls(success=True, response=response)

    @classmethod
    def fail(cls, error: AuthError) -> Self:
        response = error.response if error.response is not None else str(error)
        return cls(success=False, response=response, error=error)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp from the token endpoint."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class AuthData:
    """A token and its expiry. Replaced as a whole, never updated in place."""

    token: str | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_iso(cls, token: str | None, expires_at: Any) -> Self:
        return cls(token=token, expires_at=parse_timestamp(expires_at))

    def expires_within(self, minutes: int) -> bool:
        """Check if the token expires within the given minutes.

        A token without a known expiry is treated as expiring.
        """
        if self.expires_at is None:
            return True
        remaining = self.expires_at - datetime.now(timezone.utc)
        return remaining < timedelta(minutes=minutes)


@dataclass(frozen=True)
class AccountIdentity:
    """The authenticated account."""

    id: str | None = None
    display_name: str | None = None


class AuthState(str, Enum):
    """Lifecycle state of the authenticator."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REAUTHENTICATING = "reauthenticating"


class DeviceAuth(AuthModel):
    """Long-lived device credential."""

    account_id: str = Field(alias="accountId")
    device_id: str = Field(alias="deviceId")
    secret: str
    basic_token: str | None = Field(default=None, alias="basicToken")

    def to_form(self) -> dict[str, str]:
        """Form fields for the device_auth grant."""
        return {
            "account_id": self.account_id,
            "device_id": self.device_id,
            "secret": self.secret,
        }

    def to_event(self) -> dict[str, str]:
        """Payload emitted when a device auth is created."""
        return {
            "accountId": self.account_id,
            "deviceId": self.device_id,
            "secret": self.secret,
        }


class TokenResponse(AuthModel):
    """Body returned by the token endpoint."""

    access_token: str
    expires_at: str | None = None
    refresh_token: str | None = None
    refresh_expires_at: str | None = None
    account_id: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")

    def access(self) -> AuthData:
        return AuthData.from_iso(self.access_token, self.expires_at)

    def refresh(self) -> AuthData:
        return AuthData.from_iso(self.refresh_token, self.refresh_expires_at)

    def identity(self) -> AccountIdentity:
        return AccountIdentity(id=self.account_id, display_name=self.display_name)


class DeviceCode(AuthModel):
    """Body returned by the device authorization endpoint."""

    device_code: str
    user_code: str | None = None
    verification_uri: str | None = None
    verification_uri_complete: str
    interval: float = 5
    expires_in: int | None = None


class EulaStatus(AuthModel):
    """Current EULA version for an account."""

    version: int | str
    locale: str = "en"
