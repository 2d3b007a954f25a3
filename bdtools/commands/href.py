import json

import structlog
import typer

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.logging import console
from bdtools.models.resource import BlackDuckView

logger = structlog.get_logger('href_command')
app = typer.Typer(help='Load any resource by its URL')


def print_view(data: dict) -> None:
    console.print_json(json.dumps(data, default=str))
    view = BlackDuckView.model_validate(data)
    if view.links:
        console.print('[bold]Resource Links[/bold] (rel : href)')
        for link in view.links:
            console.print(f"  - {link.rel} : {link.href}", markup=False)
    console.rule()


@app.command()
@handle_errors
def get(
    href: str = typer.Argument(..., help='The URL to load'),
):
    """
    Load a single resource and print its JSON and links.
    """
    service = get_container().get_blackduck_service()
    service.get_current_user()

    logger.info('Loading href', href=href)
    data = service.get_json(href)
    if data is None:
        console.print(f"[red]Object at href {href} was not found.[/red]")
        raise typer.Exit(1)
    print_view(data)


@app.command('list')
@handle_errors
def list_items(
    href: str = typer.Argument(..., help='The collection URL to load'),
    limit: int | None = typer.Option(None, help='Max items to load'),
):
    """
    Page through a collection and print every item's URL, JSON and links.
    """
    service = get_container().get_blackduck_service()
    service.get_current_user()

    logger.info('Loading collection', href=href)
    items = service.get_all(href, max_items=limit)
    if not items:
        console.print(f"[yellow]No objects found at {href}[/yellow]")
        return

    console.print(f"[bold]{len(items)} object(s) found.[/bold]")
    for item in items:
        item_href = BlackDuckView.model_validate(item).href
        if item_href:
            console.print(f"  - {item_href}", markup=False)
    console.rule()
    for item in items:
        print_view(item)
