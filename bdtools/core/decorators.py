import functools
from collections.abc import Callable
from typing import Any

import structlog
import typer
from rich.markup import escape

from bdtools.core.errors import RequestFailed
from bdtools.core.logging import console

logger = structlog.get_logger()


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle exceptions in CLI commands nicely."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.Abort):
            raise
        except RequestFailed as e:
            console.print(f"[bold red]Request Failed:[/] {escape(str(e))}")
            logger.debug('Request failed', url=e.url, exc_info=True)
            raise typer.Exit(1)
        except ValueError as e:
            console.print(f"[bold red]Validation Error:[/] {escape(str(e))}")
            logger.debug('Validation error', exc_info=True)
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print('\n[yellow]Operation cancelled by user.[/]')
            raise typer.Exit(130)
        except Exception as e:
            console.print(f"[bold red]Unexpected Error:[/] {escape(str(e))}")
            logger.exception('Unexpected error')
            raise typer.Exit(1)
    return wrapper
