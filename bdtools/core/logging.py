import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console
from rich.markup import escape

# Central console for rich output
console = Console()


class RichConsoleRenderer:
    """
    A structlog renderer that prints events through rich.Console as
    key=value pairs, styled by log level or by an optional '_style' key.
    """

    def __init__(self):
        self._console = Console()
        self._level_styles = {
            'debug': 'dim',
            'info': 'green',
            'warning': 'yellow',
            'error': 'bold red',
            'critical': 'bold magenta',
        }

    def __call__(self, logger, name, event_dict):
        custom_style = event_dict.pop('_style', None)

        event = event_dict.pop('event', '')
        log_level = event_dict.pop('level', 'info')
        logger_name = event_dict.pop('logger', 'root')
        timestamp = event_dict.pop('timestamp', '')
        exc_info = event_dict.pop('exc_info', None)
        exception = event_dict.pop('exception', None)
        stack_info = event_dict.pop('stack_info', None)

        parts = []
        if timestamp:
            parts.append(f"[dim]{timestamp}[/dim]")
        if logger_name:
            parts.append(f"[bold]{logger_name}[/bold]")

        level_style = self._level_styles.get(log_level, 'white')
        parts.append(f"[{level_style}]{log_level:<8}[/{level_style}]")

        parts.append(escape(str(event)))

        for key, value in event_dict.items():
            parts.append(f"[cyan]{key}[/cyan]=[green]{escape(repr(value))}[/green]")

        final_msg = ' '.join(parts)

        if exception:
            final_msg += f"\n[red]{exception}[/red]"
        elif exc_info:
            final_msg += f"\n[red]{exc_info}[/red]"

        if stack_info:
            final_msg += f"\n[dim]{stack_info}[/dim]"

        self._console.print(final_msg, style=custom_style)

        raise structlog.DropEvent


# Copyright statements can run to many lines of licence text
MAX_VALUE_LENGTH = 120


def shorten_long_values(logger, method_name, event_dict):
    """
    Cut long string values (copyright text, server error bodies) down to
    MAX_VALUE_LENGTH characters so a record stays on one readable line.
    """
    for key, value in event_dict.items():
        if key == 'event' or not isinstance(value, str):
            continue
        if len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = value[:MAX_VALUE_LENGTH - 3] + '...'
    return event_dict


def drop_style_processor(logger, method_name, event_dict):
    """Remove the internal '_style' key so it never leaks into JSON logs."""
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO') -> None:
    """
    Configure structured logging for the application.
    SSOT for logging configuration.
    """
    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level)
    # urllib3 retries are reported through the response hook instead
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        shorten_long_values,
    ]

    # JSON lines for log shippers, rich key=value output for people
    if os.getenv('ENV') == 'production':
        processors = shared_processors + [
            drop_style_processor,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            RichConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
