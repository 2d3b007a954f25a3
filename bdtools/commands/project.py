import structlog
import typer
from rich.markup import escape
from rich.table import Table

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.logging import console
from bdtools.core.output import emit_rows
from bdtools.models.project import application_row
from bdtools.models.project import MatchType
from bdtools.models.project import PROJECT_APPLICATION_COLUMNS
from bdtools.models.project import PROJECT_COLUMNS
from bdtools.services.project_service import DeleteStats

logger = structlog.get_logger('project_command')
app = typer.Typer(help='Project operations')


@app.command('list')
@handle_errors
def list_projects(
    csv_path: str | None = typer.Option(
        None, '--csv', help='Write the projects to this CSV file',
    ),
    application_id: bool = typer.Option(
        False, '--application-id',
        help="Show each project's application ID instead of its description",
    ),
):
    """
    List every project on the server.
    """
    container = get_container()
    service = container.get_blackduck_service()
    service.get_current_user()

    logger.info('Listing projects', server=service.base_url)
    projects = service.get_projects()
    if application_id:
        project_service = container.get_project_service()
        columns = PROJECT_APPLICATION_COLUMNS
        rows = [
            application_row(p, project_service.get_application_id(p))
            for p in projects
        ]
    else:
        columns = PROJECT_COLUMNS
        rows = [p.to_row() for p in projects]
    emit_rows(f"{len(projects)} project(s)", columns, rows, csv_path)


@app.command()
@handle_errors
def find(
    name: str = typer.Argument(..., help='Project name to search for'),
    limit: int = typer.Option(100, help='Max results'),
    csv_path: str | None = typer.Option(
        None, '--csv', help='Write the projects to this CSV file',
    ),
):
    """
    Find projects matching a name.
    """
    service = get_container().get_blackduck_service()
    service.get_current_user()

    logger.info('Finding projects', name=name, server=service.base_url)
    projects = service.find_projects(name, limit=limit)
    if not projects:
        console.print(f"[yellow]No projects found matching '{escape(name)}'[/yellow]")
        return

    emit_rows(
        f"{len(projects)} project(s) matching '{name}'", PROJECT_COLUMNS,
        [p.to_row() for p in projects], csv_path,
    )


@app.command()
@handle_errors
def delete(
    regex: str = typer.Option(
        ..., help='Regular expression the whole name or application ID must match',
    ),
    match_type: MatchType = typer.Option(
        MatchType.PROJECT_NAME, help='What the regular expression is matched against',
    ),
    dry_run: bool = typer.Option(
        False, '--dry-run', help='Only list the matching projects',
    ),
    yes: bool = typer.Option(
        False, '--yes', '-y', help='Do not ask for confirmation',
    ),
):
    """
    Delete projects, their versions and their scans.
    """
    container = get_container()
    container.get_blackduck_service().get_current_user()
    service = container.get_project_service()

    projects = service.find_matching_projects(regex, match_type)
    if not projects:
        console.print(f"[yellow]No projects match '{escape(regex)}' by {match_type}[/yellow]")
        return

    console.print(f"{len(projects)} project(s) match '{escape(regex)}' by {match_type}:")
    for project in projects:
        console.print(f"  - {project.name}", markup=False)

    if dry_run:
        console.print('[bold]Dry run[/bold] - nothing was deleted.')
        return

    if not yes:
        typer.confirm('Delete these projects?', abort=True)

    stats = DeleteStats()
    for project in projects:
        service.delete_project(project, stats)

    table = Table(title='Delete Summary')
    table.add_column('Metric', style='cyan')
    table.add_column('Value', style='magenta')
    table.add_row('Projects Deleted', str(stats.projects))
    table.add_row('Versions Deleted', str(stats.versions))
    table.add_row('Code Locations Deleted', str(stats.code_locations))
    table.add_row('Failed', str(stats.failed))
    console.print(table)

    if stats.failed:
        raise typer.Exit(1)
