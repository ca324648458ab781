"""CLI interface for the item catalog."""

import json
import os
from pathlib import Path

import typer

from .config import get_settings
from .errors import CatalogError
from .server.main import open_service, run_server, setup_logging

app = typer.Typer(help="Item catalog service and command-line client")


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(error: CatalogError) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def serve():
    """Run the HTTP server."""
    run_server()


@app.command("list")
def list_items():
    """List every item in the catalog."""
    settings = get_settings()
    try:
        with open_service(settings) as service:
            _echo_json(service.list_items().to_document())
    except CatalogError as e:
        _fail(e)


@app.command()
def get(item_id: str = typer.Argument(..., help="Id of the item to show")):
    """Show a single item."""
    settings = get_settings()
    try:
        with open_service(settings) as service:
            _echo_json(service.get_item(item_id).to_document())
    except CatalogError as e:
        _fail(e)


@app.command()
def search(keyword: str = typer.Argument(..., help="Substring of the name or category")):
    """Find items whose name or category contains KEYWORD."""
    settings = get_settings()
    try:
        with open_service(settings) as service:
            items = service.search_items(keyword)
            _echo_json({"items": [item.to_document() for item in items]})
    except CatalogError as e:
        _fail(e)


@app.command()
def add(
    name: str = typer.Argument(..., help="Item name"),
    category: str = typer.Argument("", help="Item category"),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Image file to attach to the item",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log storage activity"),
):
    """Add a new item to the catalog."""
    settings = get_settings()
    if verbose:
        setup_logging(settings)

    content = image.read_bytes() if image else None
    ext = os.path.splitext(image.name)[1] if image else None

    try:
        with open_service(settings) as service:
            item = service.create_item(name, category, content, ext)
    except CatalogError as e:
        _fail(e)

    _echo_json(item.to_document())
    typer.echo(f"item received: {item.name}", err=True)


if __name__ == "__main__":
    app()
