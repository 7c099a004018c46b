"""Config CLI commands for managing settings."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from eg_auth import config as config_file
from eg_auth.config import Settings, get_settings, load_config, save_config

console = Console()
app = typer.Typer(help="Manage configuration")

# Settings that can be configured via the config command
CONFIGURABLE_KEYS = {
    "timeout": {
        "description": "HTTP timeout in seconds (5-120)",
        "type": "int",
    },
    "device_code_timeout": {
        "description": "Device code polling deadline in seconds",
        "type": "float",
    },
    "refresh_threshold_minutes": {
        "description": "Renew tokens expiring within this many minutes",
        "type": "int",
    },
    "user_agent": {
        "description": "User-Agent header for requests",
        "type": "str",
    },
}


def parse_value(key: str, value: str) -> str | int | float:
    """Parse string value to appropriate type based on key."""
    value_type = CONFIGURABLE_KEYS[key]["type"]
    try:
        if value_type == "int":
            return int(value)
        if value_type == "float":
            return float(value)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not a valid number")
    return value


def validate_value(key: str, value: str | int | float) -> None:
    """Validate a config value."""
    if key == "timeout" and not (5 <= value <= 120):
        raise typer.BadParameter("timeout must be between 5 and 120")
    elif key == "device_code_timeout" and value <= 0:
        raise typer.BadParameter("device_code_timeout must be positive")
    elif key == "refresh_threshold_minutes" and value < 0:
        raise typer.BadParameter("refresh_threshold_minutes cannot be negative")


@app.command("show")
def config_show():
    """Show all settings and where their values come from."""
    config = load_config()
    settings = get_settings()
    defaults = Settings.model_fields

    table = Table(title="eg-auth configuration", show_header=True)
    table.add_column("Setting", style="cyan", width=26)
    table.add_column("Value", style="green", width=20)
    table.add_column("Source", style="dim", width=12)
    table.add_column("Description", style="dim", width=40)

    for key, info in CONFIGURABLE_KEYS.items():
        file_value = config.get(key)
        effective_value = getattr(settings, key)

        if file_value is not None:
            source = "config.yaml"
            display_value = str(file_value)
        elif effective_value != defaults[key].default:
            source = "env var"
            display_value = str(effective_value)
        else:
            source = "default"
            display_value = f"[dim]{effective_value}[/dim]"

        table.add_row(key, display_value, source, info["description"])

    console.print(table)

    method = settings.auth.selected_method()
    console.print(f"Login method: [cyan]{method or 'not configured'}[/cyan]")
    console.print(f"[dim]Config file: {config_file.CONFIG_PATH}[/dim]")


@app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Setting name")],
    value: Annotated[str, typer.Argument(help="New value")],
):
    """
    Set a configuration value.

    Examples:
        eg-auth config set timeout 60
    """
    if key not in CONFIGURABLE_KEYS:
        console.print(f"[red]Unknown setting:[/red] {key}")
        console.print()
        console.print("[bold]Available settings:[/bold]")
        for k, info in CONFIGURABLE_KEYS.items():
            console.print(f"  [cyan]{k}[/cyan] - {info['description']}")
        raise typer.Exit(1)

    parsed_value = parse_value(key, value)
    validate_value(key, parsed_value)

    config = load_config()
    config[key] = parsed_value
    save_config(config)

    console.print(f"[green]✓[/green] {key} = {parsed_value}")


@app.command("path")
def config_path():
    """Show the path of the configuration file."""
    console.print(str(config_file.CONFIG_PATH))
