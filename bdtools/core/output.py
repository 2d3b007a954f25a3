"""Table and CSV output shared by the listing commands."""
import csv
from collections.abc import Sequence
from pathlib import Path

from rich.table import Table

from bdtools.core.logging import console


def print_table(title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    table = Table(title=title)
    for i, column in enumerate(columns):
        table.add_column(column, style='cyan' if i == 0 else None)
    for row in rows:
        table.add_row(*[str(v) for v in row])
    console.print(table)


def write_csv(path: str | Path, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        writer.writerows(rows)
    console.print(f'[bold green]Wrote {len(rows)} row(s) → {target}[/bold green]')


def emit_rows(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    csv_path: str | None = None,
) -> None:
    """Write rows to CSV when a path is given, otherwise print a table."""
    if csv_path:
        write_csv(csv_path, columns, rows)
    else:
        print_table(title, columns, rows)
