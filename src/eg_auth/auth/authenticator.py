"""Authentication state machine.

The Authenticator selects a login method from the client's auth config,
stores the resulting token state, runs the post-login side effects and
renews the access token on demand.

Token state lives in three frozen values that are always replaced
together: ``auths`` (access token), ``reauths`` (refresh token) and
``account``. A failed login or reauthentication leaves them untouched.
"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from eg_auth.auth import eula
from eg_auth.auth.credentials import resolve_code, resolve_device_auth
from eg_auth.auth.device_code import DeviceCodePoller
from eg_auth.auth.oauth import OAuthClient
from eg_auth.endpoints import (
    DEFAULT_BASIC_TOKEN,
    DEVICE_AUTH_CREATED,
    DEVICE_CODE_PROMPT,
    INVALID_TOKEN_ERROR,
    KILL_TYPE_OTHERS,
    OAUTH_DEVICE_AUTH,
    OAUTH_TOKEN_KILL_MULTIPLE,
    OAUTH_TOKEN_VERIFY,
)
from eg_auth.exceptions import (
    AuthError,
    CredentialFileError,
    InvalidCredentialInput,
    NoAuthMethodConfigured,
    TokenInvalid,
)
from eg_auth.models import (
    AccountIdentity,
    AuthData,
    AuthResult,
    AuthState,
    DeviceAuth,
    DeviceCode,
    TokenResponse,
)

if TYPE_CHECKING:
    from eg_auth.client import Client

logger = logging.getLogger(__name__)


class Authenticator:
    """Authentication manager of a client."""

    def __init__(self, client: "Client"):
        """Initialize the authenticator.

        Args:
            client: The owning client, providing config, settings, http and events
        """
        self.client = client
        self.oauth = OAuthClient(client.http)
        self.device_codes = DeviceCodePoller(
            self.oauth,
            client.http,
            timeout=client.settings.device_code_timeout,
        )

        self.auths = AuthData()
        self.reauths = AuthData()
        self.account = AccountIdentity()

        self._reauth_lock = asyncio.Lock()

    @property
    def state(self) -> AuthState:
        if self._reauth_lock.locked():
            return AuthState.REAUTHENTICATING
        if self.auths.token is None:
            return AuthState.UNAUTHENTICATED
        return AuthState.AUTHENTICATED

    def _store(self, token: TokenResponse) -> None:
        self.auths, self.reauths, self.account = (
            token.access(),
            token.refresh(),
            token.identity(),
        )

    async def authenticate(self) -> AuthResult:
        """Log in with the configured method and run post-login side effects."""
        logger.debug("Authenticating...")
        start = time.monotonic()

        config = self.client.config
        method = config.selected_method()

        if method == "device_auth":
            auth = await self.device_auth_authenticate(config.device_auth)
        elif method == "exchange_code":
            auth = await self.exchange_code_authenticate(config.exchange_code)
        elif method == "authorization_code":
            auth = await self.authorization_code_authenticate(config.authorization_code)
        elif method == "refresh_token":
            auth = await self.refresh_token_authenticate(config.refresh_token)
        elif method == "device_code":
            auth = await self.device_code_authenticate()
        else:
            return AuthResult.fail(NoAuthMethodConfigured())

        if not auth.success:
            return auth

        token = TokenResponse.model_validate(auth.response)

        self._store(token)

        if method != "device_auth" and self.client.events.listener_count(DEVICE_AUTH_CREATED) > 0:
            await self._persist_device_auth(token)

        await self.kill_other_sessions()

        if config.check_eula:
            eula_status = await self.accept_eula()
            if not eula_status.success:
                logger.warning(f"EULA checking failed: {eula_status.response}")
            elif eula_status.response.get("alreadyAccepted") is False:
                logger.debug("Successfully accepted the EULA!")

        logger.debug(f"Authentication successful ({time.monotonic() - start:.2f}s)")
        return auth

    async def refresh_token(self, force_verify: bool = False) -> AuthResult:
        """Reauthenticate if the access token is invalid or about to expire.

        Args:
            force_verify: Verify the token with the account service first

        Returns:
            Success if the token is valid or was renewed, otherwise the failed
            reauthentication result.
        """
        token_is_valid = True

        if force_verify:
            token_check = await self.client.http.send(
                False, "GET", OAUTH_TOKEN_VERIFY, f"bearer {self.auths.token}"
            )
            response = token_check.response
            if isinstance(response, dict) and response.get("errorCode") == INVALID_TOKEN_ERROR:
                logger.debug(str(TokenInvalid("Access token was rejected by the verify endpoint")))
                token_is_valid = False

        if token_is_valid and self.auths.expires_within(self.client.settings.refresh_threshold_minutes):
            token_is_valid = False

        if not token_is_valid:
            reauth = await self.reauthenticate()
            if not reauth.success:
                return reauth

        return AuthResult.ok()

    async def reauthenticate(self) -> AuthResult:
        """Renew the access token.

        If a reauthentication is already running this returns success at once
        without waiting for it.
        """
        if self._reauth_lock.locked():
            logger.debug("Reauthentication already in progress")
            return AuthResult.ok()

        async with self._reauth_lock:
            logger.debug("Reauthenticating...")
            start = time.monotonic()

            device_auth = self.client.config.device_auth
            if device_auth:
                auth = await self.device_auth_authenticate(device_auth)
            elif self.reauths.token is None:
                return AuthResult.fail(TokenInvalid("No refresh token available, authenticate first"))
            else:
                auth = await self.oauth.get_oauth_token(
                    "refresh_token", {"refresh_token": self.reauths.token}, DEFAULT_BASIC_TOKEN
                )

            if not auth.success:
                logger.warning(f"Reauthentication failed: {auth.response}")
                return auth

            self._store(TokenResponse.model_validate(auth.response))

            logger.debug(f"Reauthentication successful ({time.monotonic() - start:.2f}s)")
            return AuthResult.ok()

    async def device_auth_authenticate(self, device_auth: Any) -> AuthResult:
        """Authenticate using a device auth."""
        try:
            parsed = await resolve_device_auth(device_auth)
        except (InvalidCredentialInput, CredentialFileError) as e:
            return AuthResult.fail(e)

        return await self.oauth.get_oauth_token(
            "device_auth", parsed.to_form(), parsed.basic_token or DEFAULT_BASIC_TOKEN
        )

    async def exchange_code_authenticate(
        self, exchange_code: Any, basic_token: str = DEFAULT_BASIC_TOKEN
    ) -> AuthResult:
        """Authenticate using an exchange code."""
        try:
            code = await resolve_code(exchange_code, "exchange_code")
        except (InvalidCredentialInput, CredentialFileError) as e:
            return AuthResult.fail(e)

        return await self.oauth.get_oauth_token("exchange_code", {"exchange_code": code}, basic_token)

    async def authorization_code_authenticate(self, authorization_code: Any) -> AuthResult:
        """Authenticate using an authorization code."""
        try:
            code = await resolve_code(authorization_code, "authorization_code")
        except (InvalidCredentialInput, CredentialFileError) as e:
            return AuthResult.fail(e)

        return await self.oauth.get_oauth_token("authorization_code", {"code": code}, DEFAULT_BASIC_TOKEN)

    async def refresh_token_authenticate(self, refresh_token: Any) -> AuthResult:
        """Authenticate using a refresh token."""
        try:
            token = await resolve_code(refresh_token, "refresh_token")
        except (InvalidCredentialInput, CredentialFileError) as e:
            return AuthResult.fail(e)

        return await self.oauth.get_oauth_token(
            "refresh_token", {"refresh_token": token}, DEFAULT_BASIC_TOKEN
        )

    async def device_code_authenticate(self) -> AuthResult:
        """Authenticate using a device code.

        The verification URL is emitted on ``devicecode:prompt``. Once the user
        approves it, the switch token is traded for an exchange code which is
        then used to log in.
        """
        device_code = await self.device_codes.generate_device_code()
        if not device_code.success:
            return device_code
        code = DeviceCode.model_validate(device_code.response)

        if self.client.events.listener_count(DEVICE_CODE_PROMPT) > 0:
            await self.client.events.emit(DEVICE_CODE_PROMPT, code.verification_uri_complete)
        else:
            logger.debug(f"Device code url: {code.verification_uri_complete}")
            logger.debug(
                f"Please listen to the {DEVICE_CODE_PROMPT} event instead of using the link above in production!"
            )

        polled = await self.device_codes.use_device_code(code.device_code, code.interval)
        if not polled.success:
            return polled

        exchange = await self.device_codes.exchange_code(polled.response["access_token"])
        if not exchange.success:
            return exchange

        code = exchange.response.get("code") if isinstance(exchange.response, dict) else None
        if not code:
            return AuthResult.fail(AuthError("Exchange response did not contain a code", exchange.response))

        return await self.exchange_code_authenticate(code)

    async def generate_device_auth(self, token: TokenResponse) -> AuthResult:
        """Create a device auth for the account behind a token response."""
        return await self.client.http.send(
            True,
            "POST",
            f"{OAUTH_DEVICE_AUTH}/{token.account_id}/deviceAuth",
            f"bearer {token.access_token}",
        )

    async def _persist_device_auth(self, token: TokenResponse) -> None:
        """Create a device auth, emit it and keep it for reauthentication.

        Failures are logged only.
        """
        created = await self.generate_device_auth(token)
        if not created.success:
            logger.warning(f"Couldn't create device auth: {created.response}")
            return

        try:
            device_auth = DeviceAuth.model_validate(created.response)
        except ValidationError as e:
            logger.warning(f"Couldn't create device auth: unexpected response ({e.error_count()} errors)")
            return

        payload = device_auth.to_event()
        self.client.config.device_auth = payload
        try:
            await self.client.events.emit(DEVICE_AUTH_CREATED, payload)
        except Exception as e:
            logger.warning(f"Device auth listener failed: {e}")

    async def kill_other_sessions(self) -> AuthResult:
        """Invalidate every other session of this account.

        The result is logged and returned; callers do not act on it.
        """
        result = await self.client.http.send(
            False,
            "DELETE",
            f"{OAUTH_TOKEN_KILL_MULTIPLE}?killType={KILL_TYPE_OTHERS}",
            f"bearer {self.auths.token}",
        )
        if not result.success:
            logger.warning(f"Couldn't kill other sessions: {result.response}")
        return result

    async def accept_eula(self) -> AuthResult:
        """Accept the EULA for the current account if needed."""
        return await eula.accept_eula(self.client.http, self.account.id, self.auths.token)
