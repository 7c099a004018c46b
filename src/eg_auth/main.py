"""Main CLI entry point for eg-auth."""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from eg_auth.cli.commands import auth, config

app = typer.Typer(
    name="eg-auth",
    help="Obtain and renew account service tokens",
    no_args_is_help=True,
)

app.command("login")(auth.do_login)

app.add_typer(config.app, name="config", help="Manage configuration")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
):
    """Obtain and renew account service tokens."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )


if __name__ == "__main__":
    app()
