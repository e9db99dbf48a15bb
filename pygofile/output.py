"""Console output for the Gofile CLI."""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .utils import format_size


class OutputFormatter:
    """Render CLI results as rich text or JSON.

    In JSON mode only ``output_json`` writes to stdout; status messages go to
    stderr so the output stays machine-readable.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def _status_console(self) -> Console:
        return self.err_console if self.json_output else self.console

    def print(self, message: Any = "") -> None:
        if not self.json_output:
            self.console.print(message, soft_wrap=True)

    def info(self, message: str) -> None:
        if not self.quiet:
            self._status_console().print(message, soft_wrap=True, markup=False)

    def success(self, message: str) -> None:
        if not self.quiet:
            self._status_console().print(
                f"[green]✓[/green] {escape(message)}", soft_wrap=True
            )

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]{escape(message)}[/yellow]", soft_wrap=True)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)

    def output_json(self, data: Any) -> None:
        click.echo(json.dumps(data, indent=2, default=str))

    def output_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str],
        headers: dict[str, str] | None = None,
        title: str | None = None,
    ) -> None:
        """Print ``rows`` as a table with the given columns."""
        headers = headers or {}
        table = Table(title=title, show_lines=False)
        for column in columns:
            table.add_column(headers.get(column, column.replace("_", " ").title()))
        for row in rows:
            table.add_row(
                *("" if row.get(c) is None else str(row.get(c)) for c in columns)
            )
        self.console.print(table)

    def print_fields(self, values: dict[str, Any]) -> None:
        """Print ``label: value`` lines, skipping empty values."""
        for label, value in values.items():
            if value is None or value == "" or value == []:
                continue
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            self.console.print(
                f"[bold]{label}:[/bold] {escape(str(value))}", soft_wrap=True
            )

    def format_size(self, size_bytes: int | None) -> str:
        return format_size(size_bytes)
