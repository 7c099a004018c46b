"""Tests for credential input resolution."""

import json
from pathlib import Path

import pytest

from eg_auth.auth.credentials import (
    CallableCredential,
    FileCredential,
    InlineCredential,
    LiteralCredential,
    classify,
    load,
    resolve_code,
    resolve_device_auth,
)
from eg_auth.exceptions import CredentialFileError, InvalidCredentialInput
from eg_auth.models import DeviceAuth

DEVICE_AUTH_CAMEL = {"accountId": "acc", "deviceId": "dev", "secret": "s3cret"}
DEVICE_AUTH_SNAKE = {"account_id": "acc", "device_id": "dev", "secret": "s3cret"}


class TestClassify:
    """Tests for tagging credential inputs."""

    def test_mapping_is_inline(self):
        assert isinstance(classify({"a": 1}, "deviceAuth"), InlineCredential)

    def test_json_string_is_file(self):
        assert classify("creds.json", "exchange_code") == FileCredential("creds.json")

    def test_plain_string_is_literal(self):
        assert classify("abc123", "exchange_code") == LiteralCredential("abc123")

    def test_plain_string_is_file_when_forced(self):
        assert classify("device_auth", "deviceAuth", always_file=True) == FileCredential("device_auth")

    def test_path_object_is_file(self, tmp_path):
        source = classify(tmp_path / "creds.txt", "exchange_code")
        assert source == FileCredential(str(tmp_path / "creds.txt"))

    def test_callable(self):
        assert isinstance(classify(lambda: "x", "exchange_code"), CallableCredential)

    @pytest.mark.parametrize("value, type_name", [(42, "int"), (3.5, "float"), (True, "bool"), (["a"], "list")])
    def test_unsupported_type(self, value, type_name):
        with pytest.raises(InvalidCredentialInput, match=f"^{type_name} is not a valid exchange_code type$"):
            classify(value, "exchange_code")


@pytest.mark.asyncio
class TestLoad:
    """Tests for producing raw values."""

    async def test_sync_callable(self):
        assert await load(CallableCredential(lambda: "code")) == "code"

    async def test_async_callable(self):
        async def factory():
            return {"exchange_code": "abc"}

        assert await load(CallableCredential(factory)) == {"exchange_code": "abc"}

    async def test_missing_file(self, tmp_path):
        path = str(tmp_path / "creds.json")
        with pytest.raises(CredentialFileError) as exc_info:
            await load(FileCredential(path))
        assert exc_info.value.path == path
        assert path in str(exc_info.value)

    async def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text("{not json")
        with pytest.raises(CredentialFileError):
            await load(FileCredential(str(path)))


@pytest.mark.asyncio
class TestResolveDeviceAuth:
    """Tests for device auth resolution."""

    async def test_camel_case_mapping(self):
        device_auth = await resolve_device_auth(DEVICE_AUTH_CAMEL)
        assert device_auth == DeviceAuth(account_id="acc", device_id="dev", secret="s3cret")

    async def test_snake_case_mapping(self):
        device_auth = await resolve_device_auth(DEVICE_AUTH_SNAKE)
        assert device_auth.account_id == "acc"
        assert device_auth.device_id == "dev"

    async def test_basic_token_is_kept(self):
        device_auth = await resolve_device_auth({**DEVICE_AUTH_CAMEL, "basicToken": "Zm9vOmJhcg=="})
        assert device_auth.basic_token == "Zm9vOmJhcg=="

    async def test_from_file(self, tmp_path):
        path = tmp_path / "device_auth.json"
        path.write_text(json.dumps(DEVICE_AUTH_CAMEL))
        device_auth = await resolve_device_auth(str(path))
        assert device_auth.secret == "s3cret"

    async def test_string_without_json_suffix_is_read_as_file(self, tmp_path):
        path = tmp_path / "device_auth"
        path.write_text(json.dumps(DEVICE_AUTH_SNAKE))
        device_auth = await resolve_device_auth(str(path))
        assert device_auth.account_id == "acc"

    async def test_async_callable(self):
        async def fetch():
            return DEVICE_AUTH_CAMEL

        device_auth = await resolve_device_auth(fetch)
        assert device_auth.device_id == "dev"

    async def test_missing_file(self):
        with pytest.raises(CredentialFileError, match="creds.json"):
            await resolve_device_auth("creds.json")

    async def test_missing_fields(self):
        with pytest.raises(InvalidCredentialInput, match="secret"):
            await resolve_device_auth({"accountId": "acc", "deviceId": "dev"})

    async def test_unsupported_type(self):
        with pytest.raises(InvalidCredentialInput, match="int is not a valid deviceAuth type"):
            await resolve_device_auth(7)

    async def test_file_holding_a_list(self, tmp_path):
        path = tmp_path / "device_auth.json"
        path.write_text("[1, 2]")
        with pytest.raises(InvalidCredentialInput, match="list"):
            await resolve_device_auth(str(path))


@pytest.mark.asyncio
class TestResolveCode:
    """Tests for exchange code, authorization code and refresh token resolution."""

    async def test_literal(self):
        assert await resolve_code("abc123", "exchange_code") == "abc123"

    async def test_callable(self):
        assert await resolve_code(lambda: "abc123", "authorization_code") == "abc123"

    async def test_json_file_with_string(self, tmp_path):
        path = tmp_path / "code.json"
        path.write_text(json.dumps("abc123"))
        assert await resolve_code(str(path), "exchange_code") == "abc123"

    @pytest.mark.parametrize(
        "body",
        [
            {"exchange_code": "abc123"},
            {"exchangeCode": "abc123"},
            {"code": "abc123"},
        ],
    )
    async def test_json_file_with_mapping(self, tmp_path, body):
        path = tmp_path / "code.json"
        path.write_text(json.dumps(body))
        assert await resolve_code(Path(path), "exchange_code") == "abc123"

    async def test_mapping_without_value(self):
        with pytest.raises(InvalidCredentialInput, match="No refresh_token found"):
            await resolve_code({"other": "x"}, "refresh_token")

    async def test_callable_returning_number(self):
        with pytest.raises(InvalidCredentialInput, match="int is not a valid exchange_code type"):
            await resolve_code(lambda: 5, "exchange_code")

    async def test_missing_file(self):
        with pytest.raises(CredentialFileError) as exc_info:
            await resolve_code("creds.json", "exchange_code")
        assert exc_info.value.path == "creds.json"
