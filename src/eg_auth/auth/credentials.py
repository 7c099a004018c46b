"""Normalisation of credential inputs for each login method.

Every credential field accepts one of four shapes:

- an inline mapping (or a ready ``DeviceAuth``)
- a callable returning the value, awaited if it returns an awaitable
- a path to a ``.json`` file holding the value
- a plain string used verbatim

``classify`` tags a raw value with its shape, ``load`` turns the tag into a
raw value, and the ``resolve_*`` functions apply the per-method rules.
"""

import asyncio
import inspect
import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from eg_auth.exceptions import CredentialFileError, InvalidCredentialInput
from eg_auth.models import DeviceAuth

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"


@dataclass(frozen=True)
class InlineCredential:
    value: Mapping[str, Any] | DeviceAuth


@dataclass(frozen=True)
class CallableCredential:
    factory: Callable[[], Any]


@dataclass(frozen=True)
class FileCredential:
    path: str


@dataclass(frozen=True)
class LiteralCredential:
    value: str


CredentialSource = InlineCredential | CallableCredential | FileCredential | LiteralCredential


def classify(value: Any, field: str, always_file: bool = False) -> CredentialSource:
    """Tag a raw credential input with its shape.

    Args:
        value: The configured credential value
        field: Field name, used in error messages
        always_file: Treat every string as a file path (device auths)

    Raises:
        InvalidCredentialInput: If the value has an unsupported type
    """
    if isinstance(value, (DeviceAuth, Mapping)):
        return InlineCredential(value)
    if isinstance(value, os.PathLike):
        return FileCredential(os.fspath(value))
    if isinstance(value, str):
        if always_file or value.endswith(JSON_SUFFIX):
            return FileCredential(value)
        return LiteralCredential(value)
    if callable(value):
        return CallableCredential(value)
    raise InvalidCredentialInput(value, field)


def _read_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug(f"Could not load credential file {path}: {e}")
        raise CredentialFileError(path) from e


async def load(source: CredentialSource) -> Any:
    """Produce the raw value behind a credential source."""
    match source:
        case InlineCredential(value=value):
            return value
        case LiteralCredential(value=value):
            return value
        case FileCredential(path=path):
            return await asyncio.to_thread(_read_json, path)
        case CallableCredential(factory=factory):
            result = factory()
            if inspect.isawaitable(result):
                result = await result
            return result
    raise TypeError(f"Unknown credential source: {source!r}")


async def resolve_device_auth(value: Any) -> DeviceAuth:
    """Resolve a device auth input into a DeviceAuth.

    Strings are always read as JSON files.

    Raises:
        InvalidCredentialInput: If the value has an unsupported type or misses fields
        CredentialFileError: If a file cannot be read or parsed
    """
    raw = await load(classify(value, "deviceAuth", always_file=True))
    if isinstance(raw, DeviceAuth):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidCredentialInput(raw, "deviceAuth")
    try:
        return DeviceAuth.model_validate(dict(raw))
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise InvalidCredentialInput(
            raw, "deviceAuth", f"deviceAuth is missing required fields: {missing}"
        ) from e


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.title() for part in rest)


async def resolve_code(value: Any, field: str) -> str:
    """Resolve an exchange code, authorization code or refresh token.

    A mapping (inline, from a callable or from a JSON file) is searched for
    the snake_case field, its camelCase form, then ``code`` and ``token``.

    Args:
        value: The configured credential value
        field: ``exchange_code``, ``authorization_code`` or ``refresh_token``

    Raises:
        InvalidCredentialInput: If no string value can be derived
        CredentialFileError: If a file cannot be read or parsed
    """
    raw = await load(classify(value, field))
    if isinstance(raw, Mapping):
        for key in (field, _camel(field), "code", "token"):
            if isinstance(raw.get(key), str):
                return raw[key]
        raise InvalidCredentialInput(raw, field, f"No {field} found in the given mapping")
    if not isinstance(raw, str):
        raise InvalidCredentialInput(raw, field)
    return raw
