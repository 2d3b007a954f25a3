import typer

from bdtools.core.container import get_container
from bdtools.core.decorators import handle_errors
from bdtools.core.logging import console

app = typer.Typer()


@app.callback(invoke_without_command=True)
@handle_errors
def main():
    """
    Validate the connection by loading the user behind the API token.
    """
    container = get_container()
    service = container.get_blackduck_service()
    user = service.get_current_user()

    console.print(
        f"[bold green]Connected to {service.base_url}[/bold green] "
        f"as [bold]{user.get('userName', '<unknown>')}[/bold]",
    )
