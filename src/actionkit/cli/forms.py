"""CLI commands for forms declared in YAML"""

import asyncio
import json
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from actionkit.actions.executor import ActionExecutor, ActionRequest
from actionkit.actions.registry import ActionRegistry
from actionkit.config.loader import ConfigLoader
from actionkit.config.models import ActionKitConfig
from actionkit.core.errors import ActionKitError, ExecutionRejection
from actionkit.core.tracker import Tracker
from actionkit.forms.config import build_forms
from actionkit.observability.logging import setup_logging

CONFIG_ENV_VAR = "ACTIONKIT_CONFIG_PATH"

app = typer.Typer(
    name="forms",
    help="Check and run configured forms",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _resolve_config(config: str | None) -> Path:
    path = config or os.getenv(CONFIG_ENV_VAR)
    if not path:
        err_console.print(f"[bold red]Error:[/] no config given and {CONFIG_ENV_VAR} is not set")
        raise typer.Exit(1)
    return Path(path)


def _load(config: str | None) -> ActionKitConfig:
    config_path = _resolve_config(config)
    try:
        loaded = ConfigLoader.load(config_path)
    except ActionKitError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1) from e

    # Explicit log level from the environment wins over the config file
    if not os.getenv("ACTIONKIT_LOG_LEVEL"):
        logging_config = loaded.settings.logging
        setup_logging(level=logging_config.level, json_file=logging_config.json_file)
    return loaded


@app.command()
def check(
    config: str | None = typer.Argument(
        None,
        help=f"Path to a forms YAML file or directory (defaults to ${CONFIG_ENV_VAR})",
    ),
) -> None:
    """
    Validate a forms configuration and list its forms.

    Slot mappings and validator names are resolved, so every error that
    would surface at start-up is reported here.
    """
    loaded = _load(config)
    try:
        actions = build_forms(loaded)
    except ActionKitError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1) from e

    table = Table(title=f"Forms ({len(actions)})")
    table.add_column("Form", style="cyan", no_wrap=True)
    table.add_column("Required slots")
    table.add_column("Mappings")

    for name, form in loaded.forms.items():
        mappings = form.mappings()
        described = [
            f"{slot}: " + ", ".join(mapper.mapper_type for mapper in mappings.mapping(slot))
            for slot in form.required_slots
        ]
        table.add_row(escape(name), escape(", ".join(form.required_slots)), escape("\n".join(described)))

    console.print(table)
    console.print("[green]✓ Configuration is valid[/]")


@app.command()
def run(
    config: str = typer.Argument(..., help="Path to a forms YAML file or directory"),
    tracker_file: Path = typer.Argument(..., help="Path to a tracker JSON file"),
    form: str = typer.Option(..., "--form", "-f", help="Name of the form to run"),
) -> None:
    """
    Run one turn of a form against a tracker and print the result as JSON.
    """
    loaded = _load(config)

    try:
        tracker_data = json.loads(tracker_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        message = f"cannot read tracker {tracker_file}: {e}"
        err_console.print(f"[bold red]Error:[/] {escape(message)}")
        raise typer.Exit(1) from e

    try:
        tracker = Tracker.model_validate(tracker_data)
        executor = ActionExecutor(ActionRegistry(build_forms(loaded)))
        request = ActionRequest(next_action=form, sender_id=tracker.sender_id, tracker=tracker)
        response = asyncio.run(executor.execute(request))
    except ExecutionRejection as e:
        err_console.print(f"[bold red]Rejected:[/] {escape(e.reason)}")
        raise typer.Exit(1) from e
    except (ActionKitError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1) from e

    typer.echo(json.dumps(response.to_dict(), indent=2))
