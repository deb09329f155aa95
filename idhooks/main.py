# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
import asyncio
import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from idhooks.config import Settings, load_settings
from idhooks.core.results import HookResult
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import BaseHook
from idhooks.hooks.factory import HOOK_TYPES, create_hook
from idhooks.logging import configure_logging
from idhooks.runtime import HookRunner


app = typer.Typer(help="Identity platform hooks CLI")
console = Console()


@app.callback()
def main_callback(
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Minimum log level (DEBUG, INFO, WARNING, ERROR)"),
    ] = "INFO",
) -> None:
    """
    idhooks: registration and authentication hooks for an identity platform.
    """
    configure_logging(log_level)


def _safe_load_settings(config_path: Path | None) -> Settings:
    """Load settings, exiting with a readable error on failure.

    Raises:
        typer.Exit: If the settings file is missing or invalid.
    """
    try:
        return load_settings(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None
    except Exception as e:
        console.print(f"[red]Error loading settings:[/red] {e}")
        raise typer.Exit(code=1) from None


def _build_hook(name: str, settings: Settings) -> BaseHook:
    try:
        return create_hook(name, settings)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None


def _read_context(source: str) -> InvocationContext:
    """Read an invocation context from a JSON file, or stdin for '-'."""
    try:
        raw = sys.stdin.read() if source == "-" else Path(source).read_text()
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None
    try:
        return InvocationContext.model_validate_json(raw)
    except ValidationError as e:
        console.print(f"[red]Invalid context:[/red] {e.error_count()} validation error(s)")
        console.print(str(e))
        raise typer.Exit(code=1) from None


@app.command(name="hooks")
def hooks_command() -> None:
    """List the registered hooks."""
    table = Table(title="Registered Hooks", show_header=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Blocking", style="yellow")

    for name, hook_type in sorted(HOOK_TYPES.items()):
        table.add_row(name, str(hook_type.kind), "yes" if hook_type.kind.blocking else "no")

    console.print(table)


@app.command(name="check")
def check_command(
    name: Annotated[str, typer.Argument(help="Hook name, e.g. hubspot")],
    settings_path: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="Path to the settings YAML file"),
    ] = None,
) -> None:
    """Report missing configuration for a hook."""
    settings = _safe_load_settings(settings_path)
    hook = _build_hook(name, settings)

    missing = hook.settings.missing()
    if missing:
        console.print(f"[red]✗[/red] {name}: missing {', '.join(missing)}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {name} is configured")


@app.command(name="invoke")
def invoke_command(
    name: Annotated[str, typer.Argument(help="Hook name, e.g. hubspot")],
    context_json: Annotated[
        str,
        typer.Argument(help="Path to an invocation context JSON file, or '-' for stdin"),
    ],
    settings_path: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="Path to the settings YAML file"),
    ] = None,
) -> None:
    """Invoke a hook once and print its result as host-facing JSON."""
    settings = _safe_load_settings(settings_path)
    hook = _build_hook(name, settings)
    context = _read_context(context_json)

    async def _invoke() -> HookResult | None:
        runner = HookRunner()
        result = await runner.dispatch(hook, context)
        await runner.drain()
        return result

    result = asyncio.run(_invoke())
    if result is None:
        console.print(f"[dim]{name} is non-blocking; no result returned.[/dim]")
        return
    typer.echo(json.dumps(result.to_host(), indent=2))


if __name__ == "__main__":
    app()
