import structlog
import typer
from rich.table import Table

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.errors import RequestFailed
from bdtools.core.logging import console
from bdtools.core.output import emit_rows
from bdtools.services.copyright_service import CopyrightStats
from bdtools.services.copyright_service import ListStats

logger = structlog.get_logger('copyright_command')
app = typer.Typer(help='Copyright operations')

PROJECT_VERSION_HELP = 'The project version URL, e.g. https://host/api/projects/<id>/versions/<id>'


def print_disable_summary(stats: CopyrightStats) -> None:
    if stats.all_failures:
        console.print(
            f"[bold red]{len(stats.all_failures)} copyright(s) either failed to update "
            'or failed to validate after updating:[/bold red]',
        )
        for href in stats.all_failures:
            console.print(f"  - {href}", markup=False)

    table = Table(title='Disable Copyrights Summary')
    table.add_column('Metric', style='cyan')
    table.add_column('Value', style='magenta')
    table.add_row('Components', str(stats.components))
    table.add_row('Component Origins', str(stats.origins))
    table.add_row('Unresolved Origins', str(stats.unresolved_origins))
    table.add_row('Origin Fetch Failures', str(stats.origin_fetch_failures))
    table.add_row('Origins Without Copyrights', str(stats.no_copyrights))
    table.add_row('Copyright Fetch Failures', str(stats.copyright_fetch_failures))
    table.add_row('Copyrights', str(stats.copyrights))
    table.add_row('Updated', str(stats.updated))
    table.add_row('Skipped', str(stats.skipped))
    table.add_row('Failed To Disable', str(stats.errors))
    table.add_row('Validation Failures', str(stats.validation_failures))
    table.add_row('Total Duration', f"{stats.elapsed_time:.2f}s")
    console.print(table)


@app.command()
@handle_errors
def disable(
    project_version_url: str = typer.Option(..., help=PROJECT_VERSION_HELP),
    ignore_single_copyrights: bool = typer.Option(
        False,
        '--ignore-single-copyrights',
        help='Only disable multiple copyrights: an origin with a single copyright keeps it active',
    ),
):
    """
    Disable the copyrights of every component origin in a project version.
    """
    container = get_container()
    container.get_blackduck_service().get_current_user()
    service = container.get_copyright_service()

    try:
        stats = service.disable_copyrights(
            project_version_url, only_disable_multiple=ignore_single_copyrights,
        )
    except RequestFailed as e:
        logger.error(
            'Failed to disable copyrights - bill of materials could not be loaded',
            project_version=project_version_url, error=str(e),
        )
        raise typer.Exit(1)

    if stats.components == 0:
        console.print(
            f"[yellow]No items in the bill of materials for {project_version_url}[/yellow]",
        )
        return

    print_disable_summary(stats)


@app.command('list')
@handle_errors
def list_copyrights(
    project_version_url: str = typer.Option(..., help=PROJECT_VERSION_HELP),
    csv_path: str | None = typer.Option(
        None, '--csv', help='Write the copyrights to this CSV file',
    ),
):
    """
    List the active copyrights of every component origin in a project version.
    """
    container = get_container()
    container.get_blackduck_service().get_current_user()

    logger.info('Listing copyrights', project_version=project_version_url)
    entries = container.get_bom_service().get_bom_entries(project_version_url)
    if not entries:
        console.print(
            f"[yellow]No items in the bill of materials for {project_version_url}[/yellow]",
        )
        return

    service = container.get_copyright_service()
    stats = ListStats()
    rows = [list(row) for row in service.iter_active_copyrights(entries, stats)]
    emit_rows(
        'Active Copyrights', ['component_name', 'origin_name', 'copyright'],
        rows, csv_path,
    )
    logger.info(
        'Copyright listing complete',
        components=stats.components,
        origins=stats.origins,
        copyrights=stats.copyrights,
        origin_fetch_failures=stats.origin_fetch_failures,
        copyright_fetch_failures=stats.copyright_fetch_failures,
    )
