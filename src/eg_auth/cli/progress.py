"""Console output helpers for CLI commands."""

from contextlib import contextmanager
from typing import Generator

from rich.console import Console
from rich.status import Status

# Shared console instance
console = Console()


@contextmanager
def api_spinner(message: str) -> Generator[Status, None, None]:
    """Spinner for requests with unknown duration.

    Usage:
        with api_spinner("Logging in..."):
            result = await client.auth.authenticate()

    Args:
        message: Status message to display during operation

    Yields:
        Rich Status object for updating the message if needed
    """
    with console.status(f"[bold green]{message}", spinner="dots") as status:
        yield status


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")
