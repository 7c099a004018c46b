"""Token endpoint client for every grant type."""

import logging
from collections.abc import Mapping
from typing import Any

from eg_auth.endpoints import FORM_CONTENT_TYPE, OAUTH_TOKEN_CREATE, TOKEN_TYPE
from eg_auth.http import Transport
from eg_auth.models import AuthResult

logger = logging.getLogger(__name__)


class OAuthClient:
    """Issues "grant token" requests against the token endpoint."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def get_oauth_token(
        self,
        grant_type: str,
        value_pairs: Mapping[str, Any],
        basic_token: str,
    ) -> AuthResult:
        """Obtain a token.

        Args:
            grant_type: OAuth grant type, e.g. ``exchange_code`` or ``device_code``
            value_pairs: Grant specific form fields
            basic_token: Client identity credential for the Authorization header

        Returns:
            The transport result, unchanged. No retries happen at this layer.
        """
        form_data = {
            "grant_type": grant_type,
            "token_type": TOKEN_TYPE,
            **value_pairs,
        }
        logger.debug(f"Requesting token with grant type {grant_type}")
        return await self.transport.send(
            False,
            "POST",
            OAUTH_TOKEN_CREATE,
            f"basic {basic_token}",
            {"Content-Type": FORM_CONTENT_TYPE},
            None,
            form_data,
        )
