import dotenv
import typer

from bdtools.__version__ import __version__
from bdtools.commands import bom
from bdtools.commands import copyright
from bdtools.commands import href
from bdtools.commands import project
from bdtools.commands import user
from bdtools.commands import validate
from bdtools.core.config import get_config
from bdtools.core.logging import console
from bdtools.core.logging import setup_logging

dotenv.load_dotenv()

app = typer.Typer(
    help='bdtools: command-line examples for the Black Duck REST API.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(validate.app, name='validate', help='Validate the server connection')
app.add_typer(project.app, name='project')
app.add_typer(user.app, name='user')
app.add_typer(bom.app, name='bom')
app.add_typer(copyright.app, name='copyright')
app.add_typer(href.app, name='href')


def version_callback(value: bool):
    if value:
        console.print(f"bdtools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(False, '--debug', help='Enable debug logging'),
    url: str | None = typer.Option(
        None, envvar='BLACKDUCK_URL', help='The Black Duck server URL',
    ),
    api_token: str | None = typer.Option(
        None, envvar='BLACKDUCK_API_TOKEN', show_default=False,
        help='API token; the API has the permissions of the user that generated it',
    ),
    trust_cert: bool | None = typer.Option(
        None, '--trust-cert/--verify-cert', envvar='BLACKDUCK_TRUST_CERT',
        help='Trust the server TLS certificate without verifying it (not for production)',
    ),
    timeout: int | None = typer.Option(
        None, envvar='BLACKDUCK_TIMEOUT', help='Request timeout in seconds',
    ),
    version: bool = typer.Option(
        False, '--version', callback=version_callback, is_eager=True,
        help='Show the version and exit',
    ),
):
    """
    bdtools CLI - Black Duck REST API examples.
    """
    level = 'DEBUG' if debug else 'INFO'
    setup_logging(level=level)
    get_config().override(
        url=url, api_token=api_token, trust_cert=trust_cert, timeout=timeout,
    )


if __name__ == '__main__':
    app()
