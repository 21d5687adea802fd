"""
Root Typer application for the dithost CLI.
"""

from __future__ import annotations

import json
from enum import Enum

import typer
from typer import Typer

from dithost.bootstrap import build_instance_config_registry, build_provider_registry
from dithost.cli.apps import app as apps_app
from dithost.cli.utils import console, fail, print_ids
from dithost.core.errors import DitHostError
from dithost.core.settings import get_settings

app = Typer(
    name="dithost",
    help="Deploy applications to any registered provider.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("dithost")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"dithost {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Manage applications and inspect the provider and instance-config registries."""


app.add_typer(apps_app, name="apps", help="Application records and lifecycle.")


# ── Registries ───────────────────────────────────────────────────────────


class SchemaKind(str, Enum):
    provider = "provider"
    instance_config = "instance-config"


@app.command("providers")
def list_providers() -> None:
    """List registered provider ids."""
    print_ids("Providers", build_provider_registry(get_settings()).ids())


@app.command("instance-configs")
def list_instance_configs() -> None:
    """List registered instance-config ids."""
    print_ids("Instance configs", build_instance_config_registry(get_settings()).ids())


@app.command("schema")
def show_schema(
    kind: SchemaKind = typer.Argument(..., help="provider or instance-config."),
    config_id: str = typer.Argument(..., help="Registered id, e.g. aws or compose."),
) -> None:
    """Print the JSON Schema a provider or instance config validates against."""
    settings = get_settings()
    try:
        if kind is SchemaKind.provider:
            schema = build_provider_registry(settings).require(config_id).config_schema()
        else:
            schema = build_instance_config_registry(settings).require(config_id).validator.json_schema()
    except DitHostError as e:
        fail(e)
    console.print_json(json.dumps(schema))
