"""Authentication CLI commands."""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

import httpx
import typer
from rich.console import Console

from eg_auth.client import Client
from eg_auth.config import get_settings
from eg_auth.endpoints import DEVICE_AUTH_CREATED, DEVICE_CODE_PROMPT
from eg_auth.exceptions import AuthenticationFailed
from eg_auth.cli.progress import api_spinner, print_error, print_success, print_warning

console = Console()
app = typer.Typer(help="Authentication commands")


def _format_time_remaining(expires_at: datetime) -> str:
    """Format remaining time in a human-readable way."""
    minutes = int((expires_at - datetime.now(timezone.utc)).total_seconds() / 60)
    if minutes < 1:
        return "less than a minute"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if mins else f"{hours}h"


def build_auth_config(
    device_auth: Path | None,
    exchange_code: str | None,
    authorization_code: str | None,
    refresh_token: str | None,
    device_code: bool,
    check_eula: bool,
) -> dict[str, Any] | None:
    """Build an auth config from CLI options, or None to use the settings."""
    config: dict[str, Any] = {}
    if device_auth is not None:
        config["device_auth"] = str(device_auth)
    if exchange_code:
        config["exchange_code"] = exchange_code
    if authorization_code:
        config["authorization_code"] = authorization_code
    if refresh_token:
        config["refresh_token"] = refresh_token
    if device_code:
        config["device_code"] = True
    if not config:
        return None
    config["check_eula"] = check_eula
    return config


async def _login(config: dict[str, Any] | None, save_device_auth: Path | None, check_eula: bool) -> Client:
    client = Client(config)
    if config is None and check_eula:
        client.config.check_eula = True

    def show_prompt(url: str) -> None:
        console.print(f"Open this URL to approve the login: [cyan]{url}[/cyan]")

    def write_device_auth(payload: dict) -> None:
        save_device_auth.parent.mkdir(parents=True, exist_ok=True)
        save_device_auth.write_text(json.dumps(payload, indent=2))
        print_success(f"Device auth saved to {save_device_auth}")

    client.on(DEVICE_CODE_PROMPT, show_prompt)
    if save_device_auth is not None:
        client.on(DEVICE_AUTH_CREATED, write_device_auth)

    async with client:
        with api_spinner("Logging in..."):
            await client.login()
    return client


@app.command("login")
def do_login(
    device_auth: Annotated[
        Path | None,
        typer.Option("--device-auth", help="Path to a device auth JSON file"),
    ] = None,
    exchange_code: Annotated[
        str | None,
        typer.Option("--exchange-code", help="Exchange code or path to a JSON file"),
    ] = None,
    authorization_code: Annotated[
        str | None,
        typer.Option("--authorization-code", help="Authorization code or path to a JSON file"),
    ] = None,
    refresh_token: Annotated[
        str | None,
        typer.Option("--refresh-token", help="Refresh token or path to a JSON file"),
    ] = None,
    device_code: Annotated[
        bool,
        typer.Option("--device-code", help="Log in by approving a device code in a browser"),
    ] = False,
    check_eula: Annotated[
        bool,
        typer.Option("--check-eula", help="Accept the EULA after login if needed"),
    ] = False,
    save_device_auth: Annotated[
        Path | None,
        typer.Option("--save-device-auth", help="Write a newly created device auth to this file"),
    ] = None,
):
    """
    Authenticate with the account service.

    Without a login option the auth section of the config file is used.
    """
    config = build_auth_config(
        device_auth, exchange_code, authorization_code, refresh_token, device_code, check_eula
    )
    if config is None and get_settings().auth.selected_method() is None:
        print_error("No login method given.")
        console.print("\nUse one of:")
        console.print("  [cyan]eg-auth login --device-auth device_auth.json[/cyan]")
        console.print("  [cyan]eg-auth login --exchange-code CODE[/cyan]")
        console.print("  [cyan]eg-auth login --device-code[/cyan]")
        raise typer.Exit(1)

    try:
        client = asyncio.run(_login(config, save_device_auth, check_eula))
    except AuthenticationFailed as e:
        print_error(f"Login failed: {e.response}")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        print_error(f"Network error: {e}")
        raise typer.Exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(1)

    print_success("Login successful!")
    account = client.auth.account
    console.print(f"  Account: [bold]{account.display_name}[/bold] [dim]({account.id})[/dim]")

    expires_at = client.auth.auths.expires_at
    if expires_at:
        console.print(f"  Token valid for: [green]{_format_time_remaining(expires_at)}[/green]")
        console.print(f"  [dim]Expires at: {expires_at.strftime('%Y-%m-%d %H:%M')} UTC[/dim]")

    if save_device_auth is not None and not save_device_auth.exists():
        print_warning("No device auth was created.")
