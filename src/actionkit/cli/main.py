"""Main CLI entry point for actionkit"""

import os

import typer
from dotenv import load_dotenv

from actionkit.__version__ import __version__
from actionkit.cli import forms as forms_module
from actionkit.observability.logging import setup_logging

app = typer.Typer(
    name="actionkit",
    help="actionkit - SDK for dialogue engine action servers",
    add_completion=False,
)

# Register subcommands
app.add_typer(forms_module.app, name="forms", help="Check and run configured forms")


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"actionkit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """actionkit - SDK for dialogue engine action servers"""
    load_dotenv()
    setup_logging(level=os.getenv("ACTIONKIT_LOG_LEVEL", "WARNING"))


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
