"""Client owning the transport, events and authentication state."""

import logging
from collections.abc import Mapping
from typing import Any

from eg_auth.auth.authenticator import Authenticator
from eg_auth.config import AuthConfig, Settings, coerce_auth_config, get_settings
from eg_auth.events import EventEmitter, Listener
from eg_auth.exceptions import AuthenticationFailed
from eg_auth.http import HTTPTransport, Transport
from eg_auth.models import AuthResult

logger = logging.getLogger(__name__)


class Client:
    """Account service client.

    Usage:
        async with Client({"deviceAuth": "device_auth.json"}) as client:
            await client.login()
            await client.ensure_token()
            headers = {"Authorization": f"bearer {client.auth.auths.token}"}
    """

    def __init__(
        self,
        config: AuthConfig | Mapping[str, Any] | None = None,
        settings: Settings | None = None,
        transport: Transport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Login method selection; defaults to the ``auth`` section of the settings
            settings: Application settings; defaults to the global settings
            transport: HTTP transport; defaults to an HTTPTransport
        """
        self.settings = settings or get_settings()
        self.config = coerce_auth_config(config) if config is not None else self.settings.auth
        self.http = transport or HTTPTransport(self.settings)
        self.events = EventEmitter()
        self.auth = Authenticator(self)

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport if it supports closing."""
        aclose = getattr(self.http, "aclose", None)
        if aclose is not None:
            await aclose()

    def on(self, event: str, listener: Listener) -> Listener:
        return self.events.on(event, listener)

    def off(self, event: str, listener: Listener) -> bool:
        return self.events.off(event, listener)

    def listener_count(self, event: str) -> int:
        return self.events.listener_count(event)

    async def emit(self, event: str, payload: Any = None) -> int:
        return await self.events.emit(event, payload)

    async def login(self) -> AuthResult:
        """Authenticate, raising on failure.

        Raises:
            AuthenticationFailed: If authentication did not succeed
        """
        result = await self.auth.authenticate()
        if not result.success:
            raise AuthenticationFailed(result)
        logger.info(f"Logged in as {self.auth.account.display_name} ({self.auth.account.id})")
        return result

    async def ensure_token(self, force_verify: bool = False) -> AuthResult:
        """Renew the access token if needed. Call before protected requests."""
        return await self.auth.refresh_token(force_verify)
