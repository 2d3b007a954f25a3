import structlog
import typer

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.logging import console
from bdtools.core.output import emit_rows

logger = structlog.get_logger('bom_command')
app = typer.Typer(help='Bill of materials operations')

BOM_COLUMNS = ['component_name', 'component_version', 'origins', 'href']


@app.command('list')
@handle_errors
def list_bom(
    project_version_url: str = typer.Option(
        ..., help='The project version URL, e.g. https://host/api/projects/<id>/versions/<id>',
    ),
    csv_path: str | None = typer.Option(
        None, '--csv', help='Write the components to this CSV file',
    ),
):
    """
    List the components in a project version's bill of materials.
    """
    container = get_container()
    container.get_blackduck_service().get_current_user()

    logger.info('Listing bill of materials', project_version=project_version_url)
    entries = container.get_bom_service().get_bom_entries(project_version_url)
    if not entries:
        console.print('[yellow]No items found in the bill of materials.[/yellow]')
        return

    rows = [
        [
            e.component_name,
            e.component_version_name or '',
            str(len(e.origins)),
            e.href or '',
        ]
        for e in entries
    ]
    emit_rows(
        f"{len(entries)} item(s) in the bill of materials",
        BOM_COLUMNS, rows, csv_path,
    )
