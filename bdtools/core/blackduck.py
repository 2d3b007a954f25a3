"""Black Duck connection utilities."""
import typer
from rich.console import Console
from rich.panel import Panel


def check_connection_settings(url: str | None, token: str | None, console: Console | None = None) -> tuple[str, str]:
    """
    Check that a server URL and API token are provided.
    If not, print a user-friendly error message and exit.
    """
    console = console or Console()

    missing = []
    if not url:
        missing.append('server URL')
    if not token:
        missing.append('API token')

    if missing:
        console.print()
        console.print(
            Panel(
                f"[bold]Black Duck {' and '.join(missing)} missing[/]\n\n"
                'Every command talks to a Black Duck server and needs its URL and an [bold blue]API token[/].\n\n'
                '1. Create a token in Black Duck under [italic]My Access Tokens[/italic].\n'
                '   The API will have the permissions of the user that generated it.\n'
                '2. Set the connection details as environment variables:\n'
                '   [bold]export BLACKDUCK_URL=https://blackduck.example.com[/]\n'
                '   [bold]export BLACKDUCK_API_TOKEN=your_token_here[/]\n\n'
                'Alternatively, use the [bold]--url[/] and [bold]--api-token[/] options.',
                title='[bold red]Error[/]',
                title_align='left',
                border_style='red',
                padding=(1, 2),
            ),
        )
        raise typer.Exit(1)

    return url, token
