"""CLI UI helpers and renderers for human-facing output."""

from slurmify.cli.ui.backend import UIBackend, create_ui_backend
from slurmify.cli.ui.context import UIContext, UIResolutionError, resolve_ui_context
from slurmify.cli.ui.models import GenerationReport, MetricItem, TableSection
from slurmify.cli.ui.reports import build_generation_report, render_generation_report

__all__ = [
    "GenerationReport",
    "MetricItem",
    "TableSection",
    "UIBackend",
    "UIContext",
    "UIResolutionError",
    "build_generation_report",
    "create_ui_backend",
    "render_generation_report",
    "resolve_ui_context",
]
