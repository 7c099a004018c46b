"""EULA acceptance and product access grant."""

import logging

from pydantic import ValidationError

from eg_auth.endpoints import INIT_EULA, INIT_GRANTACCESS
from eg_auth.exceptions import AuthError
from eg_auth.http import Transport
from eg_auth.models import AuthResult, EulaStatus

logger = logging.getLogger(__name__)


async def accept_eula(transport: Transport, account_id: str | None, access_token: str | None) -> AuthResult:
    """Accept the EULA for an account if it has not been accepted yet.

    Args:
        transport: HTTP transport
        account_id: Account to accept the EULA for
        access_token: Bearer token of that account

    Returns:
        ``{"alreadyAccepted": True}`` when nothing had to be accepted,
        ``{"alreadyAccepted": False}`` after accepting and granting access,
        the first failed transport result, or a failure when the status body
        cannot be read.
    """
    authorization = f"bearer {access_token}"

    eula_data = await transport.send(False, "GET", f"{INIT_EULA}/account/{account_id}", authorization)
    if not eula_data.success:
        return eula_data
    if not eula_data.response:
        return AuthResult.ok({"alreadyAccepted": True})

    try:
        status = EulaStatus.model_validate(eula_data.response)
    except ValidationError:
        return AuthResult.fail(AuthError("Unexpected EULA status response", eula_data.response))
    logger.debug(f"Accepting EULA version {status.version} ({status.locale})")

    accepted = await transport.send(
        False,
        "POST",
        f"{INIT_EULA}/version/{status.version}/account/{account_id}/accept?locale={status.locale}",
        authorization,
    )
    if not accepted.success:
        return accepted

    access = await transport.send(False, "POST", f"{INIT_GRANTACCESS}/{account_id}", authorization)
    if not access.success:
        return access

    return AuthResult.ok({"alreadyAccepted": False})
