"""tabulate-based summary renderer."""

from __future__ import annotations

from typing import Sequence, Tuple

from tabulate import tabulate

from slurmify.cli.ui.models import (
    STATUS_DRY_RUN,
    STATUS_FAILED,
    STATUS_WRITTEN,
    MetricItem,
    TableSection,
)


ANSI_RESET = "\033[0m"
STATUS_COLORS = {
    STATUS_WRITTEN: "\033[32m",
    STATUS_FAILED: "\033[31m",
    STATUS_DRY_RUN: "\033[36m",
}


class PlainBackend:
    """Prints the summary as plain text, coloring status labels on request."""

    def __init__(self, enable_color: bool = False, width: int = 80):
        self.enable_color = enable_color
        self.rule = "-" * width

    def _title(self, title: str) -> None:
        print()
        print(title)

    def style_status(self, value: str) -> str:
        color = STATUS_COLORS.get(value) if self.enable_color else None
        return f"{color}{value}{ANSI_RESET}" if color else value

    def heading(self, text: str) -> None:
        print(text)
        print(self.rule)

    def kv_block(self, rows: Sequence[Tuple[str, str]]) -> None:
        width = max((len(label) for label, _ in rows), default=0)
        for label, value in rows:
            print(f"{label:<{width}}  {value}")

    def metrics(self, title: str, metrics: Sequence[MetricItem]) -> None:
        self._title(title)
        for item in metrics:
            label = self.style_status(item.label) if item.status else item.label
            print(f"  {label}: {item.value}")

    def table(self, section: TableSection) -> None:
        self._title(section.title)
        print(self.rule)
        if not section.rows:
            print(section.empty_message)
            return

        rows = [list(row) for row in section.rows]
        if section.status_column is not None:
            for row in rows:
                row[section.status_column] = self.style_status(row[section.status_column])
        print(tabulate(rows, headers=section.headers, tablefmt="simple"))

    def notes(self, lines: Sequence[str], title: str = "Warnings:") -> None:
        if not lines:
            return
        self._title(title)
        for line in lines:
            print(f"  - {line}")
