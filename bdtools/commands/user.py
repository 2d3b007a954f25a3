import structlog
import typer

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.output import emit_rows
from bdtools.models.user import USER_COLUMNS

logger = structlog.get_logger('user_command')
app = typer.Typer(help='User operations')


@app.command('list')
@handle_errors
def list_users(
    csv_path: str | None = typer.Option(
        None, '--csv', help='Write the users to this CSV file',
    ),
):
    """
    List every user on the server.
    """
    service = get_container().get_blackduck_service()
    service.get_current_user()

    logger.info('Listing users', server=service.base_url)
    users = service.get_users()
    emit_rows(
        f"{len(users)} user(s)", USER_COLUMNS,
        [u.to_row() for u in users], csv_path,
    )
