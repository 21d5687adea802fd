"""
CLI: ``dithost apps``, application records and lifecycle.

Usage::

    dithost apps add web -i compose --instance-file compose.yml \\
        -p aws --provider-config '{"amiNamePattern": "ubuntu-*-22.04-*"}'
    dithost apps list
    dithost apps show web --json
    dithost apps start web
    dithost apps status web
    dithost apps stop web
    dithost apps remove web --force
"""

from __future__ import annotations

from pathlib import Path

import typer

from dithost.cli.utils import console, load_config, open_controller, print_apps, print_json, run
from dithost.models.app import ApplicationRecord, VariableConfig

app = typer.Typer(no_args_is_help=True)


def _record(
    app_id: str,
    instance_type: str,
    instance_config: str | None,
    instance_file: Path | None,
    provider: str,
    provider_config: str | None,
    provider_file: Path | None,
) -> ApplicationRecord:
    return ApplicationRecord(
        id=app_id,
        instance_config=VariableConfig(
            id=instance_type, config=load_config(instance_config, instance_file)
        ),
        provider_config=VariableConfig(
            id=provider, config=load_config(provider_config, provider_file)
        ),
    )


# ── Records ──────────────────────────────────────────────────────────────


@app.command("add")
def add_app(
    app_id: str = typer.Argument(..., help="Application id."),
    instance_type: str = typer.Option(..., "--instance-type", "-i", help="Instance config id (compose, cloud-init)."),
    instance_config: str | None = typer.Option(None, "--instance-config", help="Instance config as inline YAML/JSON."),
    instance_file: Path | None = typer.Option(None, "--instance-file", exists=True, dir_okay=False, help="Instance config file."),
    provider: str = typer.Option(..., "--provider", "-p", help="Provider id (aws, stub)."),
    provider_config: str | None = typer.Option(None, "--provider-config", help="Provider config as inline YAML/JSON."),
    provider_file: Path | None = typer.Option(None, "--provider-file", exists=True, dir_okay=False, help="Provider config file."),
) -> None:
    """Register a new (stopped) application."""
    record = _record(
        app_id, instance_type, instance_config, instance_file,
        provider, provider_config, provider_file,
    )
    with open_controller() as controller:
        run(controller.add_app(record))
    console.print(f"[green]✓[/green] Added application [bold]{app_id}[/bold]")


@app.command("update")
def update_app(
    app_id: str = typer.Argument(..., help="Application id."),
    instance_type: str = typer.Option(..., "--instance-type", "-i", help="Instance config id."),
    instance_config: str | None = typer.Option(None, "--instance-config", help="Instance config as inline YAML/JSON."),
    instance_file: Path | None = typer.Option(None, "--instance-file", exists=True, dir_okay=False, help="Instance config file."),
    provider: str = typer.Option(..., "--provider", "-p", help="Provider id."),
    provider_config: str | None = typer.Option(None, "--provider-config", help="Provider config as inline YAML/JSON."),
    provider_file: Path | None = typer.Option(None, "--provider-file", exists=True, dir_okay=False, help="Provider config file."),
) -> None:
    """Replace an application's configuration (a running instance is left alone)."""
    record = _record(
        app_id, instance_type, instance_config, instance_file,
        provider, provider_config, provider_file,
    )
    with open_controller() as controller:
        run(controller.update_app(app_id, record))
    console.print(f"[green]✓[/green] Updated application [bold]{app_id}[/bold]")


@app.command("list")
def list_apps(
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List applications and whether they are running."""
    with open_controller() as controller:
        apps = run(controller.list_apps())
    if json_out:
        print_json(apps)
    else:
        print_apps(apps)


@app.command("show")
def show_app(
    app_id: str = typer.Argument(..., help="Application id."),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Show one application's record and instance info."""
    with open_controller() as controller:
        record = run(controller.get_app(app_id))
    if json_out:
        print_json(record)
    else:
        print_apps([record], title=f"Application {app_id}")


@app.command("remove")
def remove_app(
    app_id: str = typer.Argument(..., help="Application id."),
    force: bool = typer.Option(False, "--force", "-f", help="Stop a running application first."),
) -> None:
    """Delete an application."""
    with open_controller() as controller:
        run(controller.remove_app(app_id, force=force))
    console.print(f"[green]✓[/green] Removed application [bold]{app_id}[/bold]")


# ── Lifecycle ────────────────────────────────────────────────────────────


@app.command("start")
def start_app(
    app_id: str = typer.Argument(..., help="Application id."),
    json_out: bool = typer.Option(False, "--json", help="Output instance info as JSON."),
) -> None:
    """Deploy a stopped application."""
    with open_controller() as controller:
        info = run(controller.start_app(app_id))
    if json_out:
        print_json(info)
    else:
        console.print(
            f"[bold green]▲[/bold green] Started [bold]{app_id}[/bold] "
            f"({info.status.value}) ref={info.ref}"
        )


@app.command("stop")
def stop_app(
    app_id: str = typer.Argument(..., help="Application id."),
) -> None:
    """Destroy a running application's instance."""
    with open_controller() as controller:
        run(controller.stop_app(app_id))
    console.print(f"[bold red]▼[/bold red] Stopped [bold]{app_id}[/bold]")


@app.command("status")
def app_status(
    app_id: str = typer.Argument(..., help="Application id."),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Ask the provider for the live instance status."""
    with open_controller() as controller:
        info = run(controller.inspect_app(app_id))
    if json_out:
        print_json(info)
    else:
        console.print(f"[bold]{app_id}[/bold]: {info.status.value} ref={info.ref}")
