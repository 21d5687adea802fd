"""
CLI utility helpers: controller wiring, async dispatch, output formatting.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

import typer
import yaml
from rich.console import Console
from rich.table import Table

from dithost.bootstrap import build_controller, build_store
from dithost.controllers.serialized import SerializedAppController
from dithost.core.errors import DitHostError
from dithost.core.logging import configure_logging
from dithost.core.settings import get_settings
from dithost.mapping.schema import to_json_value

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


# ── Wiring ───────────────────────────────────────────────────────────────


@contextmanager
def open_controller() -> Iterator[SerializedAppController]:
    """Configure logging and yield a controller built from ``DITHOST_*`` settings.

    The SQLite store is closed on exit, including when the command fails.
    """
    settings = get_settings()
    configure_logging(settings.log_level, json_format=settings.log_format == "json")
    store = build_store(settings)
    try:
        yield SerializedAppController(build_controller(settings, store=store))
    finally:
        store.close()


def run(coro: Awaitable[T]) -> T:
    """Run ``coro`` to completion; dithost errors exit with code 1."""
    try:
        return asyncio.run(coro)
    except DitHostError as e:
        fail(e)


def fail(error: DitHostError) -> None:
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    raise typer.Exit(code=1)


# ── Input helpers ────────────────────────────────────────────────────────


def load_config(inline: str | None, path: Path | None) -> Any:
    """Parse a config given inline or as a file (YAML or JSON)."""
    if inline is not None and path is not None:
        raise typer.BadParameter("Give the config inline or as a file, not both")
    if path is not None:
        text = path.read_text(encoding="utf-8")
    elif inline is not None:
        text = inline
    else:
        return {}
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise typer.BadParameter(f"Invalid YAML/JSON config: {e}") from e
    return {} if value is None else value


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(to_json_value(payload)))


def print_apps(apps: list[Any], *, title: str = "Applications") -> None:
    if not apps:
        console.print("[dim]No applications.[/dim]")
        return
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="bold")
    table.add_column("Instance config")
    table.add_column("Provider")
    table.add_column("State")
    table.add_column("Ref", style="dim")
    for app in apps:
        if app.instance_info is not None:
            state = f"[green]running[/green] ({app.instance_info.status.value})"
            ref = json.dumps(app.instance_info.ref)
        else:
            state = "[dim]stopped[/dim]"
            ref = ""
        table.add_row(app.id, app.instance_config.id, app.provider_config.id, state, ref)
    console.print(table)


def print_ids(title: str, ids: list[str]) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="bold")
    for key in ids:
        table.add_row(key)
    console.print(table)
