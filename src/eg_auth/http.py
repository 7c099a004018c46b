"""HTTP transport used by the authenticator, with retry logic."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from eg_auth.config import Settings, get_settings
from eg_auth.exceptions import TransportFailure
from eg_auth.models import AuthResult

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the authenticator needs from an HTTP layer."""

    async def send(
        self,
        requires_json_auth: bool,
        method: str,
        url: str,
        authorization: str | None = None,
        headers: Mapping[str, str] | None = None,
        raw_body: str | None = None,
        form_body: Mapping[str, Any] | None = None,
    ) -> AuthResult: ...


def _parse_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when possible, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(status_code: int, body: Any) -> str:
    if isinstance(body, dict):
        detail = body.get("errorMessage") or body.get("errorCode")
        if detail:
            return f"Request failed ({status_code}): {detail}"
    return f"Request failed ({status_code})"


class HTTPTransport:
    """Async HTTP transport backed by httpx.

    Usage:
        async with HTTPTransport() as http:
            result = await http.send(False, "GET", url, "bearer abc")
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.settings.user_agent},
                timeout=httpx.Timeout(float(self.settings.timeout)),
            )
        return self._client

    async def __aenter__(self) -> "HTTPTransport":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make a request with retry logic."""
        client = self._ensure_client()
        return await client.request(method, url, **kwargs)

    async def send(
        self,
        requires_json_auth: bool,
        method: str,
        url: str,
        authorization: str | None = None,
        headers: Mapping[str, str] | None = None,
        raw_body: str | None = None,
        form_body: Mapping[str, Any] | None = None,
    ) -> AuthResult:
        """Send a request and wrap the outcome in an AuthResult.

        Args:
            requires_json_auth: Send ``Content-Type: application/json`` when no body is given
            method: HTTP method
            url: Absolute URL
            authorization: Value of the Authorization header, e.g. ``bearer <token>``
            headers: Extra headers
            raw_body: Raw request body
            form_body: Form fields, sent url-encoded

        Returns:
            Success with the decoded body for 2xx responses, failure with the
            decoded body and a TransportFailure otherwise.
        """
        request_headers = dict(headers or {})
        if authorization:
            request_headers["Authorization"] = authorization
        if requires_json_auth and raw_body is None and form_body is None:
            request_headers.setdefault("Content-Type", "application/json")

        kwargs: dict[str, Any] = {"headers": request_headers}
        if form_body is not None:
            kwargs["data"] = dict(form_body)
        elif raw_body is not None:
            kwargs["content"] = raw_body

        response = await self._request(method, url, **kwargs)
        body = _parse_body(response)

        if response.is_success:
            return AuthResult.ok(body)

        message = _error_message(response.status_code, body)
        logger.error(f"{method} {url}: {message}")
        return AuthResult.fail(TransportFailure(message, response.status_code, body))
