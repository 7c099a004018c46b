"""Shared fixtures for eg-auth tests."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from eg_auth import config as config_module
from eg_auth.client import Client
from eg_auth.config import Settings
from eg_auth.exceptions import TransportFailure
from eg_auth.models import AuthResult


@dataclass
class Call:
    """A request recorded by FakeTransport."""

    requires_json_auth: bool
    method: str
    url: str
    authorization: str | None
    headers: dict | None = None
    raw_body: str | None = None
    form_body: dict | None = None


@dataclass
class Route:
    method: str
    prefix: str
    results: list
    grant_type: str | None = None

    def matches(self, method: str, url: str, form_body: dict | None) -> bool:
        if method != self.method or not url.startswith(self.prefix):
            return False
        if self.grant_type is not None:
            return (form_body or {}).get("grant_type") == self.grant_type
        return True


@dataclass
class FakeTransport:
    """Transport returning scripted results.

    Each route returns its results in order and keeps repeating the last one.
    """

    calls: list[Call] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)

    def add(self, method: str, prefix: str, *results: AuthResult, grant_type: str | None = None) -> None:
        self.routes.append(Route(method, prefix, list(results), grant_type))

    async def send(
        self,
        requires_json_auth,
        method,
        url,
        authorization=None,
        headers=None,
        raw_body=None,
        form_body=None,
    ) -> AuthResult:
        self.calls.append(
            Call(requires_json_auth, method, url, authorization, headers, raw_body, form_body)
        )
        for route in self.routes:
            if route.matches(method, url, form_body):
                if len(route.results) > 1:
                    return route.results.pop(0)
                return route.results[0]
        raise AssertionError(f"Unexpected request: {method} {url}")

    def calls_to(self, prefix: str, method: str | None = None) -> list[Call]:
        return [
            c for c in self.calls
            if c.url.startswith(prefix) and (method is None or c.method == method)
        ]


def iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_token_body(
    access_token: str = "access-1",
    refresh_token: str = "refresh-1",
    expires_in_minutes: int = 240,
    account_id: str = "account-1",
    display_name: str = "Player One",
) -> dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "access_token": access_token,
        "expires_in": expires_in_minutes * 60,
        "expires_at": iso(now + timedelta(minutes=expires_in_minutes)),
        "token_type": "bearer",
        "refresh_token": refresh_token,
        "refresh_expires": 28800,
        "refresh_expires_at": iso(now + timedelta(hours=8)),
        "account_id": account_id,
        "client_id": "3446cd72694c4a4485d81b77adbb2141",
        "displayName": display_name,
        "app": "fortnite",
    }


def failure(body: Any, status_code: int = 400) -> AuthResult:
    return AuthResult.fail(TransportFailure(f"Request failed ({status_code})", status_code, body))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the YAML config at a temp file and reset global settings."""
    monkeypatch.setattr(config_module, "CONFIG_PATH", tmp_path / "config.yaml")
    for key in ("EG_AUTH_TIMEOUT", "EG_AUTH_DEVICE_CODE_TIMEOUT", "EG_AUTH_REFRESH_THRESHOLD_MINUTES"):
        monkeypatch.delenv(key, raising=False)
    config_module.reset_settings()
    yield tmp_path / "config.yaml"
    config_module.reset_settings()


@pytest.fixture
def settings():
    return Settings(device_code_timeout=300, refresh_threshold_minutes=10)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def token_body():
    return make_token_body


@pytest.fixture
def make_client(settings, transport):
    """Build a Client around the fake transport."""

    def _make(config=None, **overrides):
        client_settings = settings.model_copy(update=overrides) if overrides else settings
        return Client(config or {}, settings=client_settings, transport=transport)

    return _make
