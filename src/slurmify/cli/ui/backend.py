"""Renderer interface for the run summary."""

from __future__ import annotations

from typing import Protocol, Sequence, Tuple

from slurmify.cli.ui.context import UI_MODE_RICH, UIContext
from slurmify.cli.ui.models import MetricItem, TableSection


class UIBackend(Protocol):
    """Calls made by render_generation_report."""

    def heading(self, text: str) -> None: ...

    def kv_block(self, rows: Sequence[Tuple[str, str]]) -> None: ...

    def metrics(self, title: str, metrics: Sequence[MetricItem]) -> None: ...

    def table(self, section: TableSection) -> None: ...

    def notes(self, lines: Sequence[str], title: str = "Warnings:") -> None: ...


def create_ui_backend(ctx: UIContext) -> UIBackend:
    """Instantiate the renderer selected by resolve_ui_context."""
    if ctx.effective_mode == UI_MODE_RICH:
        from slurmify.cli.ui.rich_backend import RichBackend

        return RichBackend()

    from slurmify.cli.ui.plain import PlainBackend

    return PlainBackend(enable_color=ctx.plain_color_enabled)
