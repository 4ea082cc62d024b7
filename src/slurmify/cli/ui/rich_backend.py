"""rich-based summary renderer for interactive terminals."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from slurmify.cli.ui.models import (
    STATUS_DRY_RUN,
    STATUS_FAILED,
    STATUS_WRITTEN,
    MetricItem,
    TableSection,
)


STATUS_STYLES = {
    STATUS_WRITTEN: "bold green",
    STATUS_FAILED: "bold red",
    STATUS_DRY_RUN: "bold cyan",
}


class RichBackend:
    """Renders the summary with rich panels and tables."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _title(self, title: str) -> None:
        self.console.print()
        self.console.print(f"[bold]{escape(title)}[/bold]")

    def style_status(self, value: str) -> str:
        style = STATUS_STYLES.get(value)
        return f"[{style}]{escape(value)}[/{style}]" if style else escape(value)

    def heading(self, text: str) -> None:
        self.console.print(Panel.fit(escape(text), border_style="cyan"))

    def kv_block(self, rows: Sequence[Tuple[str, str]]) -> None:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold cyan", no_wrap=True)
        grid.add_column()
        for label, value in rows:
            grid.add_row(escape(label), escape(value))
        self.console.print(grid)

    def metrics(self, title: str, metrics: Sequence[MetricItem]) -> None:
        self._title(title)
        grid = Table.grid(padding=(0, 2))
        grid.add_column()
        grid.add_column(style="bold")
        for item in metrics:
            label = self.style_status(item.label) if item.status else escape(item.label)
            grid.add_row(label, escape(item.value))
        self.console.print(grid)

    def table(self, section: TableSection) -> None:
        self._title(section.title)
        if not section.rows:
            self.console.print(section.empty_message)
            return

        table = Table(header_style="bold cyan")
        for header in section.headers:
            table.add_column(header, overflow="fold")
        for row in section.rows:
            table.add_row(*(
                self.style_status(value) if idx == section.status_column else escape(value)
                for idx, value in enumerate(row)
            ))
        self.console.print(table)

    def notes(self, lines: Sequence[str], title: str = "Warnings:") -> None:
        if not lines:
            return
        self._title(title)
        for line in lines:
            self.console.print(f"  [dim]-[/dim] {escape(line)}")
