"""Config inspection CLI commands."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from htmlfield.content.sanitize import DEFAULT_PURIFIER_OPTIONS
from htmlfield.core.config import available_policies, load_config, load_purifier_config

console = Console()
config_app = typer.Typer(name="config", help="Field settings and purifier configs.")


@config_app.command("policies")
def list_policies() -> None:
    """List the available purifier configs."""
    cfg = load_config()
    options = available_policies(cfg.config_path)

    table = Table(title="Purifier Configs")
    table.add_column("File", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("Selected", justify="center")

    selected = cfg.field.purifier_config or ""
    for file_name, label in options.items():
        mark = "[green]Yes[/green]" if file_name == selected else ""
        table.add_row(file_name or "—", label, mark)

    console.print(table)


@config_app.command("show")
def show_settings() -> None:
    """Show the effective field settings."""
    cfg = load_config()

    table = Table(title="HTML Field Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for name, value in cfg.field.model_dump(mode="json").items():
        table.add_row(name, str(value))
    table.add_row("config_path", cfg.config_path)
    table.add_row("page_trigger", cfg.page_trigger)
    table.add_row("catalog_path", cfg.catalog_path)

    console.print(table)

    try:
        policy = load_purifier_config(cfg.config_path, cfg.field.purifier_config)
    except ValueError as exc:
        console.print(f"[red]Failed:[/red] {exc}")
        raise typer.Exit(1)
    source = "config file" if policy else "built-in defaults"
    if not policy:
        policy = DEFAULT_PURIFIER_OPTIONS

    options = Table(title=f"Purifier Options ({source})")
    options.add_column("Option", style="cyan")
    options.add_column("Value", style="white")
    for name, value in policy.items():
        options.add_row(name, escape(json.dumps(value)))

    console.print(options)
