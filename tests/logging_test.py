import pytest
import structlog
from rich.console import Console

from bdtools.core.logging import drop_style_processor
from bdtools.core.logging import MAX_VALUE_LENGTH
from bdtools.core.logging import RichConsoleRenderer
from bdtools.core.logging import shorten_long_values


def test_shorten_long_values_cuts_copyright_text():
    """Test long string values are cut to a single readable field."""
    text = 'Copyright (c) 1995-2023 Jean-loup Gailly and Mark Adler ' * 10
    event_dict = {'event': 'Failed to disable copyright', 'text': text, 'status': 500}

    result = shorten_long_values(None, 'error', event_dict)

    assert len(result['text']) == MAX_VALUE_LENGTH
    assert result['text'].endswith('...')
    assert result['status'] == 500


def test_shorten_long_values_keeps_event_and_short_values():
    """Test the event message and short values pass through untouched."""
    event = 'x' * (MAX_VALUE_LENGTH + 10)
    event_dict = {'event': event, 'origin': 'https://bd.example.com/o1'}

    result = shorten_long_values(None, 'info', event_dict)

    assert result == {'event': event, 'origin': 'https://bd.example.com/o1'}


def test_drop_style_processor():
    """Test the internal style key never reaches JSON output."""
    assert drop_style_processor(None, 'info', {'event': 'e', '_style': 'bold'}) == {'event': 'e'}


def test_rich_renderer_prints_markup_literally():
    """Test bracketed copyright text is not read as rich markup."""
    renderer = RichConsoleRenderer()
    renderer._console = Console(record=True, width=200)

    with pytest.raises(structlog.DropEvent):
        renderer(None, 'info', {
            'event': 'Disabled [copyright]',
            'level': 'info',
            'logger': 'copyright_service',
            'text': '[bold]Copyright[/bold] 2020',
        })

    output = renderer._console.export_text()
    assert 'Disabled [copyright]' in output
    assert '[bold]Copyright[/bold] 2020' in output
