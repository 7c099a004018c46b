"""Device code grant: code creation and approval polling.

The flow has two phases. ``generate_device_code`` obtains a client
credentials token for the switch client and creates a device code.
``use_device_code`` then polls the token endpoint every ``interval`` seconds
until the user approves the code, racing the poll loop against a fixed
deadline.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from eg_auth.auth.oauth import OAuthClient
from eg_auth.endpoints import (
    DEVICE_CODE_TIMEOUT_SEC,
    FORM_CONTENT_TYPE,
    FORTNITE_SWITCH,
    OAUTH_DEVICE_CODE,
    OAUTH_EXCHANGE,
)
from eg_auth.exceptions import DeviceCodeTimeout
from eg_auth.http import Transport
from eg_auth.models import AuthResult

logger = logging.getLogger(__name__)


class DeviceCodePoller:
    """Drives the device code handshake."""

    def __init__(
        self,
        oauth: OAuthClient,
        transport: Transport,
        timeout: float = DEVICE_CODE_TIMEOUT_SEC,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the poller.

        Args:
            oauth: Token endpoint client
            transport: HTTP transport for the device code and exchange endpoints
            timeout: Polling deadline in seconds
            sleep: Coroutine used to wait between polls
        """
        self.oauth = oauth
        self.transport = transport
        self.timeout = timeout
        self._sleep = sleep

    async def generate_device_code(self) -> AuthResult:
        """Create a device code.

        Returns:
            On success the response holds ``device_code``,
            ``verification_uri_complete`` and ``interval``.
        """
        switch_token = await self.oauth.get_oauth_token("client_credentials", {}, FORTNITE_SWITCH)
        if not switch_token.success:
            return switch_token

        return await self.transport.send(
            False,
            "POST",
            OAUTH_DEVICE_CODE,
            f"bearer {switch_token.response['access_token']}",
            {"Content-Type": FORM_CONTENT_TYPE},
            "prompt=login",
        )

    async def _poll(self, device_code: str, interval: float) -> AuthResult:
        attempt = 0
        while True:
            await self._sleep(interval)
            attempt += 1
            result = await self.oauth.get_oauth_token(
                "device_code", {"device_code": device_code}, FORTNITE_SWITCH
            )
            if result.success:
                logger.debug(f"Device code approved after {attempt} poll(s)")
                return result
            logger.debug(f"Device code not approved yet (poll {attempt})")

    async def use_device_code(self, device_code: str, interval: float) -> AuthResult:
        """Poll until the device code is approved or the deadline passes.

        Args:
            device_code: The code returned by generate_device_code
            interval: Seconds between polls

        Returns:
            The first successful token response, or a failure with
            DeviceCodeTimeout once the deadline has passed.
        """
        try:
            return await asyncio.wait_for(self._poll(device_code, interval), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = DeviceCodeTimeout(int(self.timeout * 1000))
            logger.warning(str(error))
            return AuthResult.fail(error)

    async def exchange_code(self, access_token: str) -> AuthResult:
        """Trade a switch access token for an exchange code."""
        return await self.transport.send(False, "GET", OAUTH_EXCHANGE, f"bearer {access_token}")
