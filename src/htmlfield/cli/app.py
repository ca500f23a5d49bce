"""Root CLI application: run the save and display pipelines on HTML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from htmlfield.cli.config_cmd import config_app
from htmlfield.content.field import HtmlField
from htmlfield.content.field_data import normalize_content
from htmlfield.core.config import load_config
from htmlfield.core.models import AppConfig
from htmlfield.refs.catalog import ReferenceCatalog

console = Console()
app = typer.Typer(
    name="htmlfield",
    help="Sanitize rich text and swap URLs for reference tags (and back).",
    no_args_is_help=True,
)

app.add_typer(config_app)


def build_field(cfg: AppConfig) -> HtmlField:
    """Wire an HtmlField to the configured reference catalog."""
    catalog = ReferenceCatalog.from_yaml(cfg.catalog_path)
    return HtmlField(
        settings=cfg.field,
        resolver=catalog,
        sites=catalog,
        config_path=cfg.config_path,
        page_trigger=cfg.page_trigger,
    )


def _read(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(1)
    return path.read_text()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@app.command()
def save(
    path: Path = typer.Argument(..., help="HTML file to serialize"),
    site_id: Optional[int] = typer.Option(None, help="Site the content belongs to"),
) -> None:
    """Print the stored form of an HTML file (sanitized, URLs swapped for reference tags)."""
    cfg = load_config()
    field = build_field(cfg)

    try:
        value = field.serialize_value(field.normalize_value(_read(path), site_id), site_id)
    except ValueError as exc:
        console.print(f"[red]Failed:[/red] {exc}")
        raise typer.Exit(1)

    if value is None:
        console.print("[dim](empty)[/dim]")
        return
    typer.echo(value)


@app.command()
def render(
    path: Path = typer.Argument(..., help="Stored HTML file to render"),
    site_id: Optional[int] = typer.Option(None, help="Site to resolve references for"),
) -> None:
    """Print the display form of stored content, with reference tags resolved."""
    cfg = load_config()
    field = build_field(cfg)

    data = field.normalize_value(_read(path), site_id)
    if data is None or data.is_empty():
        console.print("[dim](empty)[/dim]")
        return
    typer.echo(data.parsed_content)


@app.command()
def check(
    path: Path = typer.Argument(..., help="HTML file to check"),
) -> None:
    """Report whether the content would be stored at all."""
    content = normalize_content(_read(path))
    if content is None:
        console.print(f"[yellow]{path}[/yellow] is empty and would not be stored")
    else:
        console.print(f"[green]{path}[/green] has content ({len(content)} chars)")
